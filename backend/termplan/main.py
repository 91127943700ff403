from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from termplan.api.routes import (
    assignment,
    assistant,
    conflicts,
    health,
    instructors,
    reports,
    requests,
    rooms,
    sections,
)
from termplan.core.config import get_settings
from termplan.core.exceptions import AppError
from termplan.db.bootstrap import ensure_runtime_schema
from termplan.services.auto_assign import auto_assign_toggles

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema()
    yield
    auto_assign_toggles.shutdown()


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )

app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

department_prefix = f"{settings.api_prefix}/departments/{{department_id}}"

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(sections.router, prefix=f"{department_prefix}/sections", tags=["sections"])
app.include_router(conflicts.router, prefix=f"{department_prefix}/conflicts", tags=["conflicts"])
app.include_router(requests.router, prefix=f"{department_prefix}/requests", tags=["requests"])
app.include_router(instructors.router, prefix=f"{department_prefix}/instructors", tags=["instructors"])
app.include_router(rooms.router, prefix=department_prefix, tags=["rooms"])
app.include_router(assignment.router, prefix=department_prefix, tags=["assignment"])
app.include_router(reports.router, prefix=f"{department_prefix}/reports", tags=["reports"])
app.include_router(assistant.router, prefix=department_prefix, tags=["assistant"])
