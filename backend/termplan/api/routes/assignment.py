from fastapi import APIRouter, Depends

from termplan.api.deps import get_auto_assign_toggles, get_detached_store, get_store
from termplan.schemas.report import AutoAssignResult, AutoAssignStatus, AutoAssignToggle
from termplan.services.auto_assign import AutoAssignController, AutoAssignToggles, run_auto_assignment
from termplan.services.store import DocumentStore

router = APIRouter()


def _status(department_id: str, controller: AutoAssignController | None) -> AutoAssignStatus:
    if controller is None:
        return AutoAssignStatus(department_id=department_id, enabled=False)
    return AutoAssignStatus(
        department_id=department_id,
        enabled=controller.enabled,
        runs=controller.run_count,
        last_run=controller.results[-1] if controller.results else None,
    )


@router.post("/auto-assign", response_model=AutoAssignResult)
def auto_assign(department_id: str, store: DocumentStore = Depends(get_store)) -> AutoAssignResult:
    return run_auto_assignment(store, department_id)


@router.get("/auto-assign/toggle", response_model=AutoAssignStatus)
def auto_assign_status(
    department_id: str,
    toggles: AutoAssignToggles = Depends(get_auto_assign_toggles),
) -> AutoAssignStatus:
    return _status(department_id, toggles.get(department_id))


@router.put("/auto-assign/toggle", response_model=AutoAssignStatus)
def set_auto_assign(
    department_id: str,
    payload: AutoAssignToggle,
    store: DocumentStore = Depends(get_detached_store),
    toggles: AutoAssignToggles = Depends(get_auto_assign_toggles),
) -> AutoAssignStatus:
    controller = toggles.set_enabled(department_id, payload.enabled, store)
    return _status(department_id, controller)
