from __future__ import annotations

import logging
import re
import uuid

from termplan.schemas.section import STAFF, ClassSection, SectionStatus

logger = logging.getLogger(__name__)

COLUMNS = (
    "term",
    "subject",
    "course_number",
    "section",
    "title",
    "notes",
    "end_date",
    "method",
    "meeting_days",
    "begin_time",
    "end_time",
    "room",
    "faculty",
)
MIN_COLUMNS = 5
FACULTY_INDEX = COLUMNS.index("faculty")

LINE_BREAK = re.compile(r"\r?\n")


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas that are not inside double quotes."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def find_header_index(lines: list[str]) -> int | None:
    for index, line in enumerate(lines):
        lowered = line.strip().lower()
        if lowered.startswith("term") or "term,subject" in lowered:
            return index
    return None


def _is_blank(line: str) -> bool:
    return not line.replace(",", "").strip()


def _row_to_section(fields: list[str], department_id: str) -> ClassSection:
    values = {name: (fields[index].strip() if index < len(fields) else "") for index, name in enumerate(COLUMNS)}
    # Unquoted "Last, First" spills into extra columns; fold them back into the faculty name.
    extra = [field.strip() for field in fields[FACULTY_INDEX:]]
    while extra and not extra[-1]:
        extra.pop()
    faculty = ", ".join(extra).strip(", ")
    values["faculty"] = faculty or STAFF
    values["notes"] = values["notes"] or None
    return ClassSection(
        id=str(uuid.uuid4()),
        department_id=department_id,
        status=SectionStatus.imported,
        **values,
    )


def parse_schedule_csv(text: str, department_id: str) -> list[ClassSection]:
    """Parse a loosely structured schedule export into Imported sections.

    Never raises on malformed input: unreadable rows are skipped and missing
    trailing columns are defaulted.
    """
    lines = LINE_BREAK.split(text or "")
    header_index = find_header_index(lines)
    start = 0 if header_index is None else header_index + 1

    sections: list[ClassSection] = []
    skipped = 0
    for line_number, line in enumerate(lines[start:], start=start + 1):
        if _is_blank(line):
            continue
        fields = split_csv_line(line)
        if len(fields) < MIN_COLUMNS:
            skipped += 1
            logger.debug("Skipping malformed schedule line %d (%d columns)", line_number, len(fields))
            continue
        sections.append(_row_to_section(fields, department_id))

    logger.info(
        "Parsed %d section(s) for department %s (%d malformed line(s) skipped, header %s)",
        len(sections),
        department_id,
        skipped,
        "found" if header_index is not None else "missing",
    )
    return sections
