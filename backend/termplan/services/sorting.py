from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Iterable

from termplan.schemas.section import ClassSection, SectionStatus
from termplan.services.time_model import day_sort_value, parse_time_minutes

NON_DIGITS = re.compile(r"\D")
# Collates after any real name.
EMPTY_FACULTY_SENTINEL = "\uffff"

STATUS_PRIORITY: dict[SectionStatus, int] = {
    SectionStatus.new: 0,
    SectionStatus.change: 1,
    SectionStatus.delete: 2,
    SectionStatus.imported: 3,
    SectionStatus.keep: 4,
}


class SortCriterion(str, Enum):
    course = "course"
    time = "time"
    room = "room"
    faculty = "faculty"
    status = "status"


def course_number_value(course_number: str) -> int:
    digits = NON_DIGITS.sub("", course_number or "")
    return int(digits) if digits else 0


def _day_time(section: ClassSection) -> tuple[int, int]:
    return day_sort_value(section.meeting_days), parse_time_minutes(section.begin_time)


def _course_key(section: ClassSection) -> tuple:
    return (
        section.subject,
        course_number_value(section.course_number),
        section.course_number,
        section.section,
    )


def _time_key(section: ClassSection) -> tuple:
    return (*_day_time(section), section.room)


def _room_key(section: ClassSection) -> tuple:
    return (section.room, *_day_time(section))


def _faculty_key(section: ClassSection) -> tuple:
    return (section.faculty or EMPTY_FACULTY_SENTINEL, *_day_time(section))


def _status_key(section: ClassSection) -> tuple:
    return (
        STATUS_PRIORITY[section.status],
        section.subject,
        course_number_value(section.course_number),
    )


SORT_KEYS: dict[SortCriterion, Callable[[ClassSection], tuple]] = {
    SortCriterion.course: _course_key,
    SortCriterion.time: _time_key,
    SortCriterion.room: _room_key,
    SortCriterion.faculty: _faculty_key,
    SortCriterion.status: _status_key,
}


def sort_schedule(sections: Iterable[ClassSection], criterion: SortCriterion | str) -> list[ClassSection]:
    """Return a new, stably ordered list; the input is left untouched."""
    key = SORT_KEYS[SortCriterion(criterion)]
    return sorted(sections, key=key)
