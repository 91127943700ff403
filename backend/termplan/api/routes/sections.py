from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from termplan.api.deps import get_store, read_csv_body
from termplan.core.config import get_settings
from termplan.schemas.conflict import FreeRooms, SectionConflicts
from termplan.schemas.request import PreferenceRow
from termplan.schemas.section import ClassSection, ImportResult, SectionCreate, SectionOut, SectionUpdate
from termplan.services.auto_assign import run_auto_assignment
from termplan.services.conflict_service import ConflictService, free_rooms_for
from termplan.services.csv_import import parse_schedule_csv
from termplan.services.records import ROOMS, SECTIONS, get_section, load_items, load_requests, load_sections
from termplan.services.roster import room_options
from termplan.services.sections import (
    apply_preference,
    edit_section,
    mark_deleted,
    new_section,
    replay_archive,
    requested_faculty,
)
from termplan.services.sorting import SortCriterion, sort_schedule
from termplan.services.store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter()


class ArchiveReplay(BaseModel):
    sections: list[ClassSection] = Field(max_length=2000)


class PreferenceDrop(BaseModel):
    faculty_name: str = Field(min_length=1, max_length=200)
    preference: PreferenceRow


def _with_conflicts(sections: list[ClassSection], all_sections: list[ClassSection]) -> list[SectionOut]:
    by_section = ConflictService(all_sections).conflicts_by_section()
    return [SectionOut(**section.model_dump(), conflicts=by_section.get(section.id, [])) for section in sections]


def _one_with_conflicts(store: DocumentStore, department_id: str, section: ClassSection) -> SectionOut:
    conflicts = ConflictService(load_sections(store, department_id)).conflicts_for(section)
    return SectionOut(**section.model_dump(), conflicts=conflicts)


@router.get("/", response_model=list[SectionOut])
def list_sections(
    department_id: str,
    sort: SortCriterion | None = None,
    store: DocumentStore = Depends(get_store),
) -> list[SectionOut]:
    sections = load_sections(store, department_id)
    ordered = sort_schedule(sections, sort) if sort is not None else sections
    return _with_conflicts(ordered, sections)


@router.post("/", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(
    department_id: str,
    payload: SectionCreate,
    store: DocumentStore = Depends(get_store),
) -> SectionOut:
    section = new_section(department_id, **payload.model_dump())
    store.add(SECTIONS, section.to_document())
    return _one_with_conflicts(store, department_id, section)


@router.patch("/{section_id}", response_model=SectionOut)
def update_section(
    department_id: str,
    section_id: str,
    payload: SectionUpdate,
    store: DocumentStore = Depends(get_store),
) -> SectionOut:
    section = get_section(store, department_id, section_id)
    updated = edit_section(store, section, payload.model_dump(exclude_unset=True))
    return _one_with_conflicts(store, department_id, updated)


@router.delete("/{section_id}", response_model=SectionOut)
def delete_section(
    department_id: str,
    section_id: str,
    store: DocumentStore = Depends(get_store),
) -> SectionOut:
    section = get_section(store, department_id, section_id)
    return _one_with_conflicts(store, department_id, mark_deleted(store, section))


@router.post("/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
def import_sections(
    department_id: str,
    csv_text: str = Depends(read_csv_body),
    store: DocumentStore = Depends(get_store),
) -> ImportResult:
    sections = parse_schedule_csv(csv_text, department_id)
    store.batch_add(SECTIONS, [section.to_document() for section in sections])
    if sections and get_settings().auto_assign_on_import:
        run_auto_assignment(store, department_id)
        sections = [get_section(store, department_id, section.id) for section in sections]
    return ImportResult(imported=len(sections), sections=sections)


@router.post("/replay", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
def replay_sections(
    department_id: str,
    payload: ArchiveReplay,
    store: DocumentStore = Depends(get_store),
) -> ImportResult:
    sections = replay_archive(payload.sections, department_id)
    store.batch_add(SECTIONS, [section.to_document() for section in sections])
    logger.info("Replayed %d archived section(s) into %s", len(sections), department_id)
    return ImportResult(imported=len(sections), sections=sections)


@router.post("/apply-preference", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def add_section_from_preference(
    department_id: str,
    payload: PreferenceDrop,
    store: DocumentStore = Depends(get_store),
) -> SectionOut:
    section = apply_preference(None, department_id, payload.faculty_name, payload.preference)
    store.add(SECTIONS, section.to_document())
    return _one_with_conflicts(store, department_id, section)


@router.post("/{section_id}/apply-preference", response_model=SectionOut)
def apply_preference_to_section(
    department_id: str,
    section_id: str,
    payload: PreferenceDrop,
    store: DocumentStore = Depends(get_store),
) -> SectionOut:
    section = get_section(store, department_id, section_id)
    updated = apply_preference(section, department_id, payload.faculty_name, payload.preference)
    store.update(SECTIONS, section.id, updated.to_document())
    return _one_with_conflicts(store, department_id, updated)


@router.get("/{section_id}/conflicts", response_model=SectionConflicts)
def section_conflicts(
    department_id: str,
    section_id: str,
    store: DocumentStore = Depends(get_store),
) -> SectionConflicts:
    section = get_section(store, department_id, section_id)
    conflicts = ConflictService(load_sections(store, department_id)).conflicts_for(section)
    return SectionConflicts(section_id=section.id, conflicts=conflicts)


@router.get("/{section_id}/free-rooms", response_model=FreeRooms)
def section_free_rooms(
    department_id: str,
    section_id: str,
    store: DocumentStore = Depends(get_store),
) -> FreeRooms:
    section = get_section(store, department_id, section_id)
    sections = load_sections(store, department_id)
    rooms = room_options(load_items(store, ROOMS, department_id), sections)
    return FreeRooms(section_id=section.id, rooms=free_rooms_for(section, rooms, sections))


@router.get("/{section_id}/requested-faculty", response_model=list[str])
def section_requested_faculty(
    department_id: str,
    section_id: str,
    store: DocumentStore = Depends(get_store),
) -> list[str]:
    section = get_section(store, department_id, section_id)
    return [request.name for request in requested_faculty(section.title, load_requests(store, department_id))]
