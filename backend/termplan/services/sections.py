from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Iterable

from termplan.core.config import get_settings
from termplan.schemas.request import FacultyRequest, PreferenceRow
from termplan.schemas.section import ONLINE, STAFF, ClassSection, SectionStatus
from termplan.services.records import SECTIONS
from termplan.services.store import DocumentStore
from termplan.services.time_model import days_to_codes

logger = logging.getLogger(__name__)

SCHEDULING_FIELDS = ("faculty", "room", "meeting_days", "begin_time", "end_time", "title", "method")
NULLABLE_FIELDS = ("notes",)
COURSE_STRING = re.compile(r"^([A-Z]+)\s+(\d+)\s*-\s*(.+)$")
REGULAR_TEXTBOOK_COST = "Regular Cost"


def new_section(department_id: str, **fields) -> ClassSection:
    """A manually added section: Staff-taught, status New, fresh identity."""
    fields.setdefault("term", None)
    if not fields["term"]:
        fields["term"] = get_settings().default_term
    fields.pop("status", None)
    fields.pop("id", None)
    return ClassSection(
        id=str(uuid.uuid4()),
        department_id=department_id,
        status=SectionStatus.new,
        **{"faculty": STAFF, **fields},
    )


def apply_section_edit(section: ClassSection, changes: dict) -> ClassSection:
    """Merge an edit and apply the Imported promotion rule.

    An explicit status always wins. Otherwise an Imported section that is
    edited leaves Imported: ``Keep`` when every scheduling field is
    unchanged (a confirmation), ``Change`` when any of them moved.
    """
    changes = {field: value for field, value in changes.items() if value is not None or field in NULLABLE_FIELDS}
    updated = ClassSection.model_validate({**section.model_dump(), **changes})
    if "status" in changes:
        return updated
    if section.status != SectionStatus.imported:
        return updated.model_copy(update={"status": section.status})
    if not any(field in changes for field in SCHEDULING_FIELDS):
        return updated.model_copy(update={"status": section.status})

    moved = any(getattr(updated, field) != getattr(section, field) for field in SCHEDULING_FIELDS)
    return updated.model_copy(update={"status": SectionStatus.change if moved else SectionStatus.keep})


def edit_section(store: DocumentStore, section: ClassSection, changes: dict) -> ClassSection:
    updated = apply_section_edit(section, changes)
    store.update(SECTIONS, section.id, updated.to_document())
    return updated


def mark_deleted(store: DocumentStore, section: ClassSection) -> ClassSection:
    """Sections are never hard-deleted from the active view."""
    return edit_section(store, section, {"status": SectionStatus.delete})


def replay_archive(sections: Iterable[ClassSection], department_id: str) -> list[ClassSection]:
    return [
        section.model_copy(
            update={"id": str(uuid.uuid4()), "department_id": department_id, "status": SectionStatus.imported}
        )
        for section in sections
    ]


def parse_course_string(full_title: str) -> tuple[str, str, str]:
    """Split ``MCSI 200 - Programming 1`` into subject, course number and title."""
    match = COURSE_STRING.match(full_title or "")
    if match:
        return match.group(1), match.group(2), match.group(3)
    return "", "", full_title


def modality_to_method(modality: str) -> str:
    if modality == "Online":
        return ONLINE
    if modality == "Hybrid":
        return "HYBRID"
    return "LEC"


def preference_notes(preference: PreferenceRow) -> str:
    parts: list[str] = []
    if preference.same_as_last_year:
        parts.append("[Same as last year]")
    if preference.textbook_cost and preference.textbook_cost != REGULAR_TEXTBOOK_COST:
        parts.append(f"[{preference.textbook_cost}]")
    if preference.notes:
        parts.append(preference.notes)
    return " ".join(parts)


def apply_preference(section: ClassSection | None, department_id: str, faculty_name: str, preference: PreferenceRow) -> ClassSection:
    """Bind a faculty preference to a section, or create a New section from it.

    Dropping onto an existing section keeps its time and room.
    """
    subject, course_number, title = parse_course_string(preference.class_title)
    method = modality_to_method(preference.modality)
    days = days_to_codes(preference.days_available)
    notes = preference_notes(preference)

    if section is not None:
        return section.model_copy(
            update={
                "faculty": faculty_name,
                "subject": subject or "UNK",
                "course_number": course_number or "000",
                "title": title,
                "method": method,
                "meeting_days": days,
                "notes": notes,
                "status": SectionStatus.change,
            }
        )

    return new_section(
        department_id,
        faculty=faculty_name,
        subject=subject or "MCSI",
        course_number=course_number or "101",
        title=title,
        method=method,
        meeting_days=days,
        notes=notes,
        section="NEW",
        begin_time="",
        end_time="",
        room=ONLINE if method == ONLINE else "",
    )


def requested_faculty(section_title: str, requests: Iterable[FacultyRequest]) -> list[FacultyRequest]:
    lowered = (section_title or "").lower()
    return [
        request
        for request in requests
        if any(preference.class_title.lower() in lowered for preference in request.preferences)
    ]
