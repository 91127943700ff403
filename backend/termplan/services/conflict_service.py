from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from termplan.schemas.conflict import ConflictDetail, ConflictReport
from termplan.schemas.section import ClassSection
from termplan.services.time_model import has_day_overlap, has_time_overlap


def _occupies_same_slot(section: ClassSection, other: ClassSection) -> bool:
    return has_day_overlap(section.meeting_days, other.meeting_days) and has_time_overlap(
        section.begin_time, section.end_time, other.begin_time, other.end_time
    )


def _partition_peers(section: ClassSection, all_sections: Iterable[ClassSection]) -> List[ClassSection]:
    return [
        other
        for other in all_sections
        if other.id != section.id and other.department_id == section.department_id and other.is_active
    ]


def detect_conflicts(section: ClassSection, all_sections: Iterable[ClassSection]) -> List[str]:
    """Advisory room double-booking messages for one section."""
    if not section.has_physical_room or not section.has_meeting_pattern:
        return []
    if not section.is_active:
        return []

    conflicts: List[str] = []
    for other in _partition_peers(section, all_sections):
        if other.room != section.room:
            continue
        if _occupies_same_slot(section, other):
            conflicts.append(
                f"Room conflict with {other.subject} {other.course_number} (Sec {other.section})"
            )
    return conflicts


def free_rooms_for(section: ClassSection, all_rooms: Iterable[str], all_sections: Iterable[ClassSection]) -> List[str]:
    if not section.has_meeting_pattern:
        return []

    peers = _partition_peers(section, all_sections)
    free: List[str] = []
    for room in all_rooms:
        occupied = any(other.room == room and _occupies_same_slot(section, other) for other in peers)
        if not occupied:
            free.append(room)
    return free


class ConflictService:
    def __init__(self, sections: List[ClassSection]):
        self.sections = sections

    def conflicts_for(self, section: ClassSection) -> List[str]:
        return detect_conflicts(section, self.sections)

    def conflicts_by_section(self) -> Dict[str, List[str]]:
        return {section.id: self.conflicts_for(section) for section in self.sections}

    def detect_conflicts(self) -> ConflictReport:
        conflicts: List[ConflictDetail] = []

        # Bucket by (department, room) so the pairwise check stays within one room.
        by_room: Dict[tuple[str, str], List[ClassSection]] = defaultdict(list)
        for section in self.sections:
            if section.is_active and section.has_physical_room and section.has_meeting_pattern:
                by_room[(section.department_id, section.room)].append(section)

        for (_, room), room_sections in by_room.items():
            n = len(room_sections)
            for i in range(n):
                s1 = room_sections[i]
                for j in range(i + 1, n):
                    s2 = room_sections[j]
                    if not _occupies_same_slot(s1, s2):
                        continue
                    conflicts.append(ConflictDetail(
                        id=f"room-{s1.id}-{s2.id}",
                        conflict_type="room_conflict",
                        description=f"Room overlap in {room}: {s1.label} and {s2.label}",
                        room=room,
                        affected_sections=[s1.id, s2.id],
                    ))

        return ConflictReport(conflicts=conflicts)
