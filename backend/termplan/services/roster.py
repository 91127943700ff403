from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from termplan.core.exceptions import WorkflowError
from termplan.schemas.instructor import ApprovalStatus, Instructor
from termplan.schemas.reference import PartitionedItem
from termplan.schemas.request import FacultyRequest, FacultyRequestSubmit
from termplan.schemas.section import STAFF, ClassSection
from termplan.services.records import INSTRUCTORS, REQUESTS, ROOMS, SECTIONS, load_items, load_requests, load_sections
from termplan.services.store import DocumentStore

logger = logging.getLogger(__name__)

DECIDABLE = (ApprovalStatus.pending, ApprovalStatus.sent)


def upsert_request(store: DocumentStore, department_id: str, submission: FacultyRequestSubmit) -> FacultyRequest:
    """One request per (department, faculty name): resubmitting replaces the earlier one."""
    existing = load_requests(store, department_id)
    match = None
    if submission.id:
        match = next((request for request in existing if request.id == submission.id), None)
    if match is None:
        match = next((request for request in existing if request.name == submission.name), None)

    data = submission.model_dump(exclude={"id"})
    if match is not None:
        request = FacultyRequest(id=match.id, department_id=department_id, **data)
        store.update(REQUESTS, match.id, request.to_document())
        logger.info("Updated request %s for %s in %s", match.id, request.name, department_id)
        return request

    request = FacultyRequest(department_id=department_id, **data)
    store.add(REQUESTS, request.to_document())
    logger.info("Recorded request %s for %s in %s", request.id, request.name, department_id)
    return request


def roster_order(instructors: Iterable[Instructor]) -> list[Instructor]:
    return sorted((item for item in instructors if item.name != STAFF), key=lambda item: item.seniority_rank)


def apply_instructor_edit(instructor: Instructor, changes: dict) -> Instructor:
    """Merge a roster edit; a null clears seniority and is ignored elsewhere."""
    changes = {field: value for field, value in changes.items() if value is not None or field == "seniority"}
    return Instructor.model_validate({**instructor.model_dump(), **changes})


def publish_for_review(store: DocumentStore, instructors: Iterable[Instructor]) -> list[str]:
    """Move Pending instructors to Sent and return every reviewer's email."""
    recipients: list[str] = []
    for instructor in roster_order(instructors):
        if instructor.approval_status not in DECIDABLE:
            continue
        if instructor.email:
            recipients.append(instructor.email)
        if instructor.approval_status == ApprovalStatus.pending:
            store.update(INSTRUCTORS, instructor.id, {"approvalStatus": ApprovalStatus.sent.value})
    logger.info("Published schedule for review to %d instructor(s)", len(recipients))
    return recipients


def record_decision(store: DocumentStore, instructor: Instructor, approved: bool, comment: str | None = None) -> Instructor:
    if instructor.approval_status not in DECIDABLE:
        raise WorkflowError(
            f"{instructor.name} has already responded",
            details={"approval_status": instructor.approval_status.value},
        )
    updated = instructor.model_copy(
        update={
            "approval_status": ApprovalStatus.approved if approved else ApprovalStatus.rejected,
            "approval_comment": comment,
            "approval_timestamp": datetime.now(timezone.utc),
        }
    )
    store.update(INSTRUCTORS, instructor.id, updated.to_document())
    return updated


def record_reminder(store: DocumentStore, instructor: Instructor) -> Instructor:
    updated = instructor.model_copy(update={"reminder_count": instructor.reminder_count + 1})
    store.update(INSTRUCTORS, instructor.id, {"reminderCount": updated.reminder_count})
    return updated


def unsubmitted_instructors(instructors: Iterable[Instructor], requests: Iterable[FacultyRequest]) -> list[Instructor]:
    submitted = {request.name for request in requests}
    return [instructor for instructor in instructors if instructor.name not in submitted]


def faculty_options(requests: Iterable[FacultyRequest]) -> list[str]:
    names = {STAFF}
    names.update(request.name for request in requests)
    return sorted(names)


def merged_options(canonical: Iterable[str], observed: Iterable[str]) -> list[str]:
    """Canonical values plus any literal seen on a record but missing from the list."""
    values = {value for value in canonical if value}
    values.update(value for value in observed if value)
    return sorted(values)


def room_options(rooms: Iterable[PartitionedItem], sections: Iterable[ClassSection]) -> list[str]:
    return merged_options((room.value for room in rooms), (section.room for section in sections))


def rename_room(store: DocumentStore, department_id: str, old_value: str, new_value: str) -> int:
    """Rename a room and carry the new name onto every section in the department using it."""
    for room in load_items(store, ROOMS, department_id):
        if room.value == old_value:
            store.update(ROOMS, room.id, {"value": new_value})

    updated = 0
    for section in load_sections(store, department_id):
        if section.room == old_value:
            store.update(SECTIONS, section.id, {"room": new_value})
            updated += 1
    logger.info("Renamed room %s to %s in %s (%d section(s))", old_value, new_value, department_id, updated)
    return updated
