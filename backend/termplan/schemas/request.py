from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
TEXTBOOK_COST_TIERS = ("No Cost", "Low Cost", "Regular Cost")


class PreferenceRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rank: int = Field(ge=1)
    class_title: str = Field(alias="classTitle", max_length=200)
    days_available: list[str] = Field(default_factory=list, alias="daysAvailable")
    times_available: list[str] = Field(default_factory=list, alias="timesAvailable")
    campus: str = ""
    modality: str = ""
    textbook_cost: Literal["No Cost", "Low Cost", "Regular Cost"] = Field(default="Regular Cost", alias="textbookCost")
    notes: str | None = None
    same_as_last_year: bool = Field(default=False, alias="sameAsLastYear")

    @field_validator("days_available")
    @classmethod
    def validate_days(cls, value: list[str]) -> list[str]:
        cleaned = [day.strip() for day in value if day.strip()]
        invalid = [day for day in cleaned if day not in DAY_NAMES]
        if invalid:
            raise ValueError(f"Invalid day(s): {', '.join(invalid)}")
        return cleaned


class WillingToTeach(BaseModel):
    live: bool = False
    online: bool = False
    hybrid: bool = False


class FacultyRequest(BaseModel):
    """One faculty member's ranked teaching preferences for a term."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    department_id: str = Field(alias="departmentId")
    name: str = Field(min_length=1, max_length=200)
    email: str = ""
    contact_number: str = Field(default="", alias="contactNumber")
    load_desired: int = Field(default=0, ge=0, alias="loadDesired")
    preferences: list[PreferenceRow] = Field(default_factory=list)
    certified_online: bool = Field(default=False, alias="certifiedOnline")
    willing_to_teach: WillingToTeach = Field(default_factory=WillingToTeach, alias="willingToTeach")
    special_instructions: str = Field(default="", alias="specialInstructions")
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="submittedAt")

    @property
    def ranked_preferences(self) -> list[PreferenceRow]:
        return sorted(self.preferences, key=lambda row: row.rank)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FacultyRequestSubmit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field(min_length=1, max_length=200)
    email: str = ""
    contact_number: str = Field(default="", alias="contactNumber")
    load_desired: int = Field(default=0, ge=0, le=20, alias="loadDesired")
    preferences: list[PreferenceRow] = Field(default_factory=list, max_length=20)
    certified_online: bool = Field(default=False, alias="certifiedOnline")
    willing_to_teach: WillingToTeach = Field(default_factory=WillingToTeach, alias="willingToTeach")
    special_instructions: str = Field(default="", alias="specialInstructions")
