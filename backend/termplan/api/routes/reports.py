from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from termplan.api.deps import get_store
from termplan.schemas.report import DashboardStats, UtilizationReport
from termplan.services.records import load_instructors, load_requests, load_sections
from termplan.services.reporting import (
    dashboard_stats,
    render_schedule_html,
    render_utilization_html,
    room_utilization,
)
from termplan.services.sorting import SortCriterion, sort_schedule
from termplan.services.store import DocumentStore

router = APIRouter()

EXCEL_MEDIA_TYPE = "application/vnd.ms-excel"


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(department_id: str, store: DocumentStore = Depends(get_store)) -> DashboardStats:
    return dashboard_stats(
        load_sections(store, department_id),
        load_requests(store, department_id),
        load_instructors(store, department_id),
    )


@router.get("/utilization", response_model=UtilizationReport)
def utilization(department_id: str, store: DocumentStore = Depends(get_store)) -> UtilizationReport:
    return room_utilization(department_id, load_sections(store, department_id))


@router.get("/utilization/export")
def utilization_export(department_id: str, store: DocumentStore = Depends(get_store)) -> HTMLResponse:
    report = room_utilization(department_id, load_sections(store, department_id))
    return HTMLResponse(
        content=render_utilization_html(report),
        media_type=EXCEL_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{department_id}-room-utilization.xls"'},
    )


@router.get("/export")
def export_schedule(
    department_id: str,
    title: str = "Schedule",
    sort: SortCriterion = SortCriterion.course,
    store: DocumentStore = Depends(get_store),
) -> HTMLResponse:
    sections = sort_schedule(load_sections(store, department_id), sort)
    return HTMLResponse(
        content=render_schedule_html(sections, title),
        media_type=EXCEL_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{department_id}-schedule.xls"'},
    )
