import pytest

from termplan.core.exceptions import WorkflowError
from termplan.schemas.instructor import ApprovalStatus, Instructor
from termplan.schemas.reference import PartitionedItem
from termplan.schemas.request import FacultyRequest, FacultyRequestSubmit
from termplan.services.records import INSTRUCTORS, ROOMS, SECTIONS, load_requests
from termplan.services.roster import (
    apply_instructor_edit,
    faculty_options,
    merged_options,
    publish_for_review,
    record_decision,
    record_reminder,
    rename_room,
    roster_order,
    unsubmitted_instructors,
    upsert_request,
)


def test_resubmission_updates_in_place_by_name(store):
    first = upsert_request(store, "dept-a", FacultyRequestSubmit(name="Smith, Jane", load_desired=2))
    second = upsert_request(store, "dept-a", FacultyRequestSubmit(name="Smith, Jane", load_desired=3))

    requests = load_requests(store, "dept-a")
    assert len(requests) == 1
    assert second.id == first.id
    assert requests[0].load_desired == 3


def test_resubmission_matches_by_id_first(store):
    first = upsert_request(store, "dept-a", FacultyRequestSubmit(name="Smith, Jane", load_desired=2))
    renamed = upsert_request(store, "dept-a", FacultyRequestSubmit(id=first.id, name="Smith, J.", load_desired=1))
    assert renamed.id == first.id
    assert [request.name for request in load_requests(store, "dept-a")] == ["Smith, J."]


def test_same_name_in_other_department_is_separate(store):
    upsert_request(store, "dept-a", FacultyRequestSubmit(name="Smith, Jane"))
    upsert_request(store, "dept-b", FacultyRequestSubmit(name="Smith, Jane"))
    assert len(load_requests(store, "dept-a")) == 1
    assert len(load_requests(store, "dept-b")) == 1


def test_roster_order_skips_staff_and_puts_unranked_last():
    instructors = [
        Instructor(department_id="d", name="Unranked"),
        Instructor(department_id="d", name="Staff", seniority=1),
        Instructor(department_id="d", name="Senior", seniority=2),
    ]
    assert [item.name for item in roster_order(instructors)] == ["Senior", "Unranked"]


def test_publish_moves_pending_to_sent(store):
    pending = Instructor(id="p", department_id="d", name="Pending", email="p@example.edu")
    approved = Instructor(id="a", department_id="d", name="Done", email="a@example.edu", approval_status=ApprovalStatus.approved)
    sent = Instructor(id="s", department_id="d", name="Sent", email="s@example.edu", approval_status=ApprovalStatus.sent)
    store.batch_add(INSTRUCTORS, [item.to_document() for item in (pending, approved, sent)])

    recipients = publish_for_review(store, [pending, approved, sent])

    assert sorted(recipients) == ["p@example.edu", "s@example.edu"]
    assert store.get(INSTRUCTORS, "p")["approvalStatus"] == "Sent"
    assert store.get(INSTRUCTORS, "a")["approvalStatus"] == "Approved"


def test_decision_records_comment_and_timestamp(store):
    instructor = Instructor(id="i1", department_id="d", name="Lee", approval_status=ApprovalStatus.sent)
    store.add(INSTRUCTORS, instructor.to_document())

    updated = record_decision(store, instructor, approved=False, comment="Swap Tuesday section")

    assert updated.approval_status == ApprovalStatus.rejected
    assert updated.approval_timestamp is not None
    assert store.get(INSTRUCTORS, "i1")["approvalComment"] == "Swap Tuesday section"

    with pytest.raises(WorkflowError):
        record_decision(store, updated, approved=True)


def test_reminder_count_increments(store):
    instructor = Instructor(id="i1", department_id="d", name="Lee", reminder_count=1)
    store.add(INSTRUCTORS, instructor.to_document())
    assert record_reminder(store, instructor).reminder_count == 2
    assert store.get(INSTRUCTORS, "i1")["reminderCount"] == 2


def test_unsubmitted_and_faculty_options():
    instructors = [Instructor(department_id="d", name="Lee"), Instructor(department_id="d", name="Smith")]
    requests = [FacultyRequest(department_id="d", name="Smith")]
    assert [item.name for item in unsubmitted_instructors(instructors, requests)] == ["Lee"]
    assert faculty_options(requests) == ["Smith", "Staff"]


def test_merged_options_fall_back_to_observed_values():
    assert merged_options(["CAT 201", "CAT 105"], ["CAT 105", "GYM", ""]) == ["CAT 105", "CAT 201", "GYM"]


def test_rename_room_cascades_within_department(store, make_section):
    store.add(ROOMS, PartitionedItem(id="r1", department_id="dept-a", value="CAT 201").to_document())
    store.batch_add(
        SECTIONS,
        [
            make_section(id="a", room="CAT 201").to_document(),
            make_section(id="b", room="CAT 105").to_document(),
            make_section(id="c", department_id="dept-b", room="CAT 201").to_document(),
        ],
    )

    assert rename_room(store, "dept-a", "CAT 201", "CAT 210") == 1
    assert store.get(ROOMS, "r1")["value"] == "CAT 210"
    assert store.get(SECTIONS, "a")["room"] == "CAT 210"
    assert store.get(SECTIONS, "c")["room"] == "CAT 201"


def test_instructor_edit_ignores_null_name_but_clears_seniority():
    instructor = Instructor(department_id="dept-a", name="Kim", email="kim@example.edu", seniority=2)
    updated = apply_instructor_edit(instructor, {"name": None, "email": None, "seniority": None})
    assert updated.name == "Kim"
    assert updated.email == "kim@example.edu"
    assert updated.seniority is None
