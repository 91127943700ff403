from fastapi import APIRouter, Depends, status

from termplan.api.deps import get_store
from termplan.schemas.instructor import (
    ApprovalDecision,
    Instructor,
    InstructorCreate,
    InstructorUpdate,
    PublishResult,
)
from termplan.services.records import INSTRUCTORS, get_instructor, load_instructors
from termplan.services.roster import (
    apply_instructor_edit,
    publish_for_review,
    record_decision,
    record_reminder,
    roster_order,
)
from termplan.services.store import DocumentStore

router = APIRouter()


@router.get("/", response_model=list[Instructor])
def list_instructors(department_id: str, store: DocumentStore = Depends(get_store)) -> list[Instructor]:
    return roster_order(load_instructors(store, department_id))


@router.post("/", response_model=Instructor, status_code=status.HTTP_201_CREATED)
def create_instructor(
    department_id: str,
    payload: InstructorCreate,
    store: DocumentStore = Depends(get_store),
) -> Instructor:
    instructor = Instructor(department_id=department_id, **payload.model_dump())
    store.add(INSTRUCTORS, instructor.to_document())
    return instructor


@router.patch("/{instructor_id}", response_model=Instructor)
def update_instructor(
    department_id: str,
    instructor_id: str,
    payload: InstructorUpdate,
    store: DocumentStore = Depends(get_store),
) -> Instructor:
    instructor = get_instructor(store, department_id, instructor_id)
    updated = apply_instructor_edit(instructor, payload.model_dump(exclude_unset=True))
    store.update(INSTRUCTORS, instructor.id, updated.to_document())
    return updated


@router.post("/publish", response_model=PublishResult)
def publish(department_id: str, store: DocumentStore = Depends(get_store)) -> PublishResult:
    recipients = publish_for_review(store, load_instructors(store, department_id))
    return PublishResult(recipients=recipients, notified=len(recipients))


@router.post("/{instructor_id}/decision", response_model=Instructor)
def decide(
    department_id: str,
    instructor_id: str,
    payload: ApprovalDecision,
    store: DocumentStore = Depends(get_store),
) -> Instructor:
    instructor = get_instructor(store, department_id, instructor_id)
    return record_decision(store, instructor, payload.approved, payload.comment)


@router.post("/{instructor_id}/reminder", response_model=Instructor)
def remind(department_id: str, instructor_id: str, store: DocumentStore = Depends(get_store)) -> Instructor:
    return record_reminder(store, get_instructor(store, department_id, instructor_id))
