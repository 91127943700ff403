from fastapi import APIRouter, Depends

from termplan.api.deps import get_store
from termplan.schemas.conflict import ConflictReport
from termplan.services.conflict_service import ConflictService
from termplan.services.records import load_sections
from termplan.services.store import DocumentStore

router = APIRouter()


@router.get("/", response_model=ConflictReport)
def detect_conflicts(department_id: str, store: DocumentStore = Depends(get_store)) -> ConflictReport:
    return ConflictService(load_sections(store, department_id)).detect_conflicts()
