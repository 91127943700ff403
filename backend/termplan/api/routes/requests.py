from fastapi import APIRouter, Depends

from termplan.api.deps import get_store
from termplan.schemas.request import FacultyRequest, FacultyRequestSubmit
from termplan.services.records import load_instructors, load_requests
from termplan.services.auto_assign import order_by_seniority
from termplan.services.roster import faculty_options, upsert_request
from termplan.services.store import DocumentStore

router = APIRouter()


@router.get("/", response_model=list[FacultyRequest])
def list_requests(department_id: str, store: DocumentStore = Depends(get_store)) -> list[FacultyRequest]:
    return order_by_seniority(load_requests(store, department_id), load_instructors(store, department_id))


@router.put("/", response_model=FacultyRequest)
def submit_request(
    department_id: str,
    payload: FacultyRequestSubmit,
    store: DocumentStore = Depends(get_store),
) -> FacultyRequest:
    return upsert_request(store, department_id, payload)


@router.get("/faculty-options", response_model=list[str])
def list_faculty_options(department_id: str, store: DocumentStore = Depends(get_store)) -> list[str]:
    return faculty_options(load_requests(store, department_id))
