from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class PartitionedItem(BaseModel):
    """A department-scoped reference value such as a room or time block."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    department_id: str = Field(alias="departmentId")
    value: str = Field(min_length=1, max_length=100)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ItemCreate(BaseModel):
    value: str = Field(min_length=1, max_length=100)


class RoomRename(BaseModel):
    value: str = Field(min_length=1, max_length=100)


class RenameResult(BaseModel):
    old_value: str
    new_value: str
    sections_updated: int
