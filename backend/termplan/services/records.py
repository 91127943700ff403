from __future__ import annotations

from termplan.core.exceptions import DepartmentMismatchError, ResourceNotFoundError
from termplan.schemas.instructor import Instructor
from termplan.schemas.reference import PartitionedItem
from termplan.schemas.request import FacultyRequest
from termplan.schemas.section import ClassSection
from termplan.services.store import DocumentStore

SECTIONS = "sections"
REQUESTS = "requests"
INSTRUCTORS = "instructors"
ROOMS = "rooms"
TIME_BLOCKS = "timeBlocks"


def load_sections(store: DocumentStore, department_id: str) -> list[ClassSection]:
    return [ClassSection.model_validate(item) for item in store.list(SECTIONS, department_id)]


def load_requests(store: DocumentStore, department_id: str) -> list[FacultyRequest]:
    return [FacultyRequest.model_validate(item) for item in store.list(REQUESTS, department_id)]


def load_instructors(store: DocumentStore, department_id: str) -> list[Instructor]:
    return [Instructor.model_validate(item) for item in store.list(INSTRUCTORS, department_id)]


def load_items(store: DocumentStore, collection: str, department_id: str) -> list[PartitionedItem]:
    return [PartitionedItem.model_validate(item) for item in store.list(collection, department_id)]


def _get_scoped(store: DocumentStore, collection: str, department_id: str, record_id: str) -> dict:
    record = store.get(collection, record_id)
    if record is None:
        raise ResourceNotFoundError(collection, record_id)
    owner = record.get("departmentId")
    if owner != department_id:
        raise DepartmentMismatchError(department_id, owner or "")
    return record


def get_section(store: DocumentStore, department_id: str, section_id: str) -> ClassSection:
    return ClassSection.model_validate(_get_scoped(store, SECTIONS, department_id, section_id))


def get_instructor(store: DocumentStore, department_id: str, instructor_id: str) -> Instructor:
    return Instructor.model_validate(_get_scoped(store, INSTRUCTORS, department_id, instructor_id))
