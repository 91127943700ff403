from __future__ import annotations

import re
from collections.abc import Iterable

UNPARSEABLE_TIME = 9999
NO_DAY = 8

DAY_ORDER = "MTWRFSU"
DAY_CODES: dict[str, str] = {
    "Mon": "M",
    "Tue": "T",
    "Wed": "W",
    "Thu": "R",
    "Fri": "F",
    "Sat": "S",
    "Sun": "U",
}
CODE_TO_DAY: dict[str, str] = {code: name for name, code in DAY_CODES.items()}

TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):([0-5]\d)\s*(AM|PM)\s*$", re.IGNORECASE)


def parse_time_minutes(value: str | None) -> int:
    """Convert a wall-clock string such as ``9:30 AM`` to minutes since midnight.

    Anything that is not a well-formed 12-hour time yields ``UNPARSEABLE_TIME``
    so it sorts after every real time. Never raises.
    """
    if not value:
        return UNPARSEABLE_TIME
    match = TIME_PATTERN.match(value)
    if match is None:
        return UNPARSEABLE_TIME
    hour = int(match.group(1))
    minute = int(match.group(2))
    if not 1 <= hour <= 12:
        return UNPARSEABLE_TIME
    period = match.group(3).upper()
    if period == "PM" and hour != 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    if minutes == UNPARSEABLE_TIME:
        return ""
    hour, minute = divmod(minutes, 60)
    period = "PM" if hour >= 12 else "AM"
    display = hour % 12 or 12
    return f"{display}:{minute:02d} {period}"


def day_code(day_name: str) -> str:
    return DAY_CODES.get(day_name.strip()[:3].title(), "")


def day_name(code: str) -> str:
    return CODE_TO_DAY.get(code.upper(), "")


def days_to_codes(day_names: Iterable[str]) -> str:
    """Day names as a code string in weekday order, e.g. [Wed, Mon] -> "MW"."""
    codes = {day_code(name) for name in day_names}
    return "".join(code for code in DAY_ORDER if code in codes)


def day_sort_value(days: str | None) -> int:
    """Index of the earliest weekday present, ``NO_DAY`` when none is."""
    if not days:
        return NO_DAY
    normalized = days.upper()
    for index, code in enumerate(DAY_ORDER):
        if code in normalized:
            return index
    return NO_DAY


def has_day_overlap(days1: str | None, days2: str | None) -> bool:
    if not days1 or not days2:
        return False
    other = days2.upper()
    return any(char in other for char in days1.upper())


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    if UNPARSEABLE_TIME in (start1, end1, start2, end2):
        return False
    return max(start1, start2) < min(end1, end2)


def has_time_overlap(start1: str | None, end1: str | None, start2: str | None, end2: str | None) -> bool:
    return intervals_overlap(
        parse_time_minutes(start1),
        parse_time_minutes(end1),
        parse_time_minutes(start2),
        parse_time_minutes(end2),
    )
