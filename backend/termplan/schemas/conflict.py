from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal["room_conflict"]
    description: str
    # Room conflicts are advisory; they never block a save.
    severity: Literal["hard", "soft"] = "soft"
    room: str
    affected_sections: List[str]

class SectionConflicts(BaseModel):
    section_id: str
    conflicts: List[str]

class FreeRooms(BaseModel):
    section_id: str
    rooms: List[str]

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]
