from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNRANKED_SENIORITY = 99


class EmploymentType(str, Enum):
    full_time = "Full-Time"
    part_time = "Part-Time"


class ApprovalStatus(str, Enum):
    pending = "Pending"
    sent = "Sent"
    approved = "Approved"
    rejected = "Rejected"


class Instructor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    department_id: str = Field(alias="departmentId")
    name: str = Field(min_length=1, max_length=200)
    email: str = ""
    type: EmploymentType = EmploymentType.full_time
    seniority: int | None = Field(default=None, ge=1)
    reminder_count: int = Field(default=0, ge=0, alias="reminderCount")
    approval_status: ApprovalStatus = Field(default=ApprovalStatus.pending, alias="approvalStatus")
    approval_comment: str | None = Field(default=None, alias="approvalComment")
    approval_timestamp: datetime | None = Field(default=None, alias="approvalTimestamp")
    is_scheduler: bool = Field(default=False, alias="isScheduler")

    @property
    def seniority_rank(self) -> int:
        return self.seniority if self.seniority is not None else UNRANKED_SENIORITY

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class InstructorCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=200)
    email: str = ""
    type: EmploymentType = EmploymentType.full_time
    seniority: int | None = Field(default=None, ge=1)
    is_scheduler: bool = Field(default=False, alias="isScheduler")


class InstructorUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    type: EmploymentType | None = None
    seniority: int | None = Field(default=None, ge=1)
    is_scheduler: bool | None = Field(default=None, alias="isScheduler")


class ApprovalDecision(BaseModel):
    approved: bool
    comment: str | None = Field(default=None, max_length=2000)


class PublishResult(BaseModel):
    recipients: list[str]
    notified: int
