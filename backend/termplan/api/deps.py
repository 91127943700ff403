from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session, sessionmaker

from termplan.core.config import get_settings
from termplan.core.exceptions import AppError
from termplan.db.session import SessionLocal
from termplan.services.assistant import ScheduleAssistant
from termplan.services.auto_assign import AutoAssignToggles, auto_assign_toggles
from termplan.services.store import DocumentStore, SessionScopedStore, SqlDocumentStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return SqlDocumentStore(db)


def get_session_factory() -> sessionmaker:
    return SessionLocal


def get_detached_store(session_factory: sessionmaker = Depends(get_session_factory)) -> DocumentStore:
    return SessionScopedStore(session_factory)


def get_auto_assign_toggles() -> AutoAssignToggles:
    return auto_assign_toggles


def get_assistant() -> ScheduleAssistant:
    return ScheduleAssistant()


async def read_csv_body(request: Request) -> str:
    max_bytes = max(1, get_settings().max_import_bytes)
    raw_length = request.headers.get("content-length")
    if raw_length:
        try:
            declared = int(raw_length)
        except ValueError:
            declared = 0
        if declared > max_bytes:
            raise AppError(
                f"Import too large ({declared} bytes). Maximum allowed is {max_bytes} bytes.",
                status_code=413,
            )
    body = await request.body()
    if len(body) > max_bytes:
        raise AppError(f"Import too large. Maximum allowed is {max_bytes} bytes.", status_code=413)
    return body.decode("utf-8-sig", errors="replace")
