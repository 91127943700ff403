from __future__ import annotations

from pydantic import BaseModel, Field


class FacultyLoad(BaseModel):
    name: str
    assigned: int
    desired: int
    seniority: int | None = None

    @property
    def satisfied(self) -> bool:
        return self.assigned >= self.desired


class DashboardStats(BaseModel):
    total_active: int
    new_sections: int
    deleted_sections: int
    net_change: int
    staffed_sections: int
    sections_staffed_pct: int
    total_load_desired: int
    total_load_assigned: int
    requests_assigned_pct: int
    requests_received: int
    full_time_instructors: int
    part_time_instructors: int
    unsubmitted_instructors: list[str] = Field(default_factory=list)
    faculty_loads: list[FacultyLoad] = Field(default_factory=list)


class OccupiedInterval(BaseModel):
    section_id: str
    label: str
    meeting_days: str
    begin_time: str
    end_time: str
    begin_minutes: int | None = None
    end_minutes: int | None = None
    faculty: str


class UtilizationAnomaly(BaseModel):
    room: str
    first_section_id: str
    second_section_id: str
    description: str


class RoomUtilization(BaseModel):
    room: str
    section_count: int
    weekly_minutes: int
    intervals: list[OccupiedInterval]
    anomalies: list[UtilizationAnomaly] = Field(default_factory=list)


class UtilizationReport(BaseModel):
    department_id: str
    rooms: list[RoomUtilization]
    unplaced_sections: int
    anomaly_count: int


class Assignment(BaseModel):
    section_id: str
    faculty: str
    preference_rank: int
    class_title: str


class AutoAssignResult(BaseModel):
    run_id: int
    department_id: str
    assignments: list[Assignment] = Field(default_factory=list)
    satisfied_requests: list[str] = Field(default_factory=list)


class AssistantQuestion(BaseModel):
    question: str = Field(min_length=1, max_length=4000)


class AssistantAnswer(BaseModel):
    answer: str


class AutoAssignToggle(BaseModel):
    enabled: bool


class AutoAssignStatus(BaseModel):
    department_id: str
    enabled: bool
    runs: int = 0
    last_run: AutoAssignResult | None = None
