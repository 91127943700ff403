from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

STAFF = "Staff"
ONLINE = "ONLINE"
TBA = "TBA"
NON_PHYSICAL_ROOMS = frozenset({"", ONLINE, TBA})


class SectionStatus(str, Enum):
    new = "New"
    change = "Change"
    delete = "Delete"
    keep = "Keep"
    imported = "Imported"


class ClassSection(BaseModel):
    """One scheduled (or placeholder) teaching assignment for a term.

    Field names follow the stored document keys (camelCase aliases) so a
    section can be round-tripped through the document store unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    department_id: str = Field(alias="departmentId")
    term: str = ""
    subject: str = ""
    course_number: str = Field(default="", alias="courseNumber")
    section: str = ""
    title: str = ""
    end_date: str = Field(default="", alias="endDate")
    method: str = ""
    meeting_days: str = Field(default="", alias="meetingDays")
    begin_time: str = Field(default="", alias="beginTime")
    end_time: str = Field(default="", alias="endTime")
    room: str = ""
    faculty: str = STAFF
    status: SectionStatus = SectionStatus.new
    notes: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status != SectionStatus.delete

    @property
    def counts_toward_load(self) -> bool:
        # Imported rows stay provisional until someone confirms them.
        return self.status not in (SectionStatus.delete, SectionStatus.imported)

    @property
    def is_unassigned(self) -> bool:
        return self.faculty in (STAFF, "")

    @property
    def has_physical_room(self) -> bool:
        return self.room not in NON_PHYSICAL_ROOMS

    @property
    def has_meeting_pattern(self) -> bool:
        return bool(self.meeting_days and self.begin_time and self.end_time)

    @property
    def label(self) -> str:
        return f"{self.subject} {self.course_number} (Sec {self.section})"

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SectionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    term: str | None = None
    subject: str = Field(default="", max_length=20)
    course_number: str = Field(default="", alias="courseNumber", max_length=20)
    section: str = Field(default="", max_length=20)
    title: str = Field(default="", max_length=200)
    end_date: str = Field(default="", alias="endDate")
    method: str = Field(default="", max_length=20)
    meeting_days: str = Field(default="", alias="meetingDays", pattern=r"^[MTWRFSUmtwrfsu]*$")
    begin_time: str = Field(default="", alias="beginTime")
    end_time: str = Field(default="", alias="endTime")
    room: str = ""
    faculty: str = STAFF
    notes: str | None = None


class SectionUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    term: str | None = None
    subject: str | None = Field(default=None, max_length=20)
    course_number: str | None = Field(default=None, alias="courseNumber", max_length=20)
    section: str | None = Field(default=None, max_length=20)
    title: str | None = Field(default=None, max_length=200)
    end_date: str | None = Field(default=None, alias="endDate")
    method: str | None = Field(default=None, max_length=20)
    meeting_days: str | None = Field(default=None, alias="meetingDays", pattern=r"^[MTWRFSUmtwrfsu]*$")
    begin_time: str | None = Field(default=None, alias="beginTime")
    end_time: str | None = Field(default=None, alias="endTime")
    room: str | None = None
    faculty: str | None = None
    status: SectionStatus | None = None
    notes: str | None = None


class SectionOut(ClassSection):
    conflicts: list[str] = Field(default_factory=list)


class ImportResult(BaseModel):
    imported: int
    sections: list[ClassSection]
