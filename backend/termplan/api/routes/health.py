from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Engine

from termplan.db.bootstrap import REQUIRED_COLUMNS
from termplan.db.session import engine
from termplan.models.document import StoredDocument

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def collection_counts(bind: Engine) -> tuple[dict[str, int], int]:
    """Stored documents per collection, and how many departments hold any."""
    with bind.connect() as connection:
        rows = connection.execute(
            select(StoredDocument.collection, func.count())
            .group_by(StoredDocument.collection)
            .order_by(StoredDocument.collection)
        ).all()
        departments = connection.execute(select(func.count(func.distinct(StoredDocument.department_id)))).scalar_one()
    return {collection: count for collection, count in rows}, departments


def schema_gaps(bind: Engine) -> tuple[list[str], dict[str, list[str]]]:
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    with bind.connect() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        for table_name, columns in REQUIRED_COLUMNS.items():
            if table_name not in table_names:
                missing_tables.append(table_name)
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            missing = sorted(columns - existing)
            if missing:
                missing_columns[table_name] = missing
    return missing_tables, missing_columns


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    store_error: str | None = None
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    documents: dict[str, int] = {}
    departments = 0

    try:
        missing_tables, missing_columns = schema_gaps(engine)
        if not missing_tables and not missing_columns:
            documents, departments = collection_counts(engine)
    except Exception as exc:  # pragma: no cover - environment dependent
        store_error = str(exc)

    ready = store_error is None and not missing_tables and not missing_columns
    payload = {
        "status": "ok" if ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": {
            "ok": store_error is None,
            "missing_tables": missing_tables,
            "missing_columns": missing_columns,
            "error": store_error,
        },
        "documents": documents,
        "departments": departments,
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
