from __future__ import annotations

import logging
from collections import defaultdict
from html import escape
from typing import Iterable

from termplan.schemas.instructor import EmploymentType, Instructor
from termplan.schemas.report import (
    DashboardStats,
    FacultyLoad,
    OccupiedInterval,
    RoomUtilization,
    UtilizationAnomaly,
    UtilizationReport,
)
from termplan.schemas.request import FacultyRequest
from termplan.schemas.section import ClassSection, SectionStatus
from termplan.services.auto_assign import assigned_count, order_by_seniority
from termplan.services.roster import unsubmitted_instructors
from termplan.services.sorting import SortCriterion, sort_schedule
from termplan.services.time_model import (
    UNPARSEABLE_TIME,
    format_minutes,
    has_day_overlap,
    intervals_overlap,
    parse_time_minutes,
)

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    ("Status", "status"),
    ("Term", "term"),
    ("Subject", "subject"),
    ("Course", "course_number"),
    ("Section", "section"),
    ("Title", "title"),
    ("Method", "method"),
    ("Days", "meeting_days"),
    ("Begin", "begin_time"),
    ("End", "end_time"),
    ("Room", "room"),
    ("Faculty", "faculty"),
    ("Notes", "notes"),
)

GRAY = "#e5e7eb"
STYLE_IMPORTED_UNASSIGNED = f"background-color:{GRAY};color:#4b5563;font-style:italic;"
STYLE_IMPORTED_ASSIGNED = f"background-color:{GRAY};color:#374151;font-weight:bold;"
STATUS_STYLES: dict[SectionStatus, str] = {
    SectionStatus.keep: "background-color:#dbeafe;color:#1e3a8a;font-weight:bold;",
    SectionStatus.change: "background-color:#dcfce7;color:#14532d;font-weight:bold;",
    SectionStatus.delete: "background-color:#d2b48c;color:#422006;",
    SectionStatus.new: "background-color:#fce7f3;color:#831843;font-weight:bold;",
}


def _percent(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole > 0 else 0


def dashboard_stats(
    sections: list[ClassSection],
    requests: list[FacultyRequest],
    instructors: list[Instructor],
) -> DashboardStats:
    active = [section for section in sections if section.is_active]
    new_count = sum(1 for section in sections if section.status == SectionStatus.new)
    deleted_count = sum(1 for section in sections if section.status == SectionStatus.delete)
    staffed = sum(1 for section in active if not section.is_unassigned)

    seniority = {instructor.name: instructor.seniority for instructor in instructors}
    loads = [
        FacultyLoad(
            name=request.name,
            assigned=assigned_count(request.name, active),
            desired=request.load_desired,
            seniority=seniority.get(request.name),
        )
        for request in order_by_seniority(requests, instructors)
    ]
    desired_total = sum(load.desired for load in loads)
    assigned_total = sum(load.assigned for load in loads)

    return DashboardStats(
        total_active=len(active),
        new_sections=new_count,
        deleted_sections=deleted_count,
        net_change=new_count - deleted_count,
        staffed_sections=staffed,
        sections_staffed_pct=_percent(staffed, len(active)),
        total_load_desired=desired_total,
        total_load_assigned=assigned_total,
        requests_assigned_pct=_percent(assigned_total, desired_total),
        requests_received=len(requests),
        full_time_instructors=sum(1 for item in instructors if item.type == EmploymentType.full_time),
        part_time_instructors=sum(1 for item in instructors if item.type == EmploymentType.part_time),
        unsubmitted_instructors=[item.name for item in unsubmitted_instructors(instructors, requests)],
        faculty_loads=loads,
    )


def _interval(section: ClassSection) -> OccupiedInterval:
    begin = parse_time_minutes(section.begin_time)
    end = parse_time_minutes(section.end_time)
    return OccupiedInterval(
        section_id=section.id,
        label=section.label,
        meeting_days=section.meeting_days,
        begin_time=format_minutes(begin) or section.begin_time,
        end_time=format_minutes(end) or section.end_time,
        begin_minutes=None if begin == UNPARSEABLE_TIME else begin,
        end_minutes=None if end == UNPARSEABLE_TIME else end,
        faculty=section.faculty,
    )


def _weekly_minutes(interval: OccupiedInterval) -> int:
    if interval.begin_minutes is None or interval.end_minutes is None:
        return 0
    duration = max(0, interval.end_minutes - interval.begin_minutes)
    return duration * len(set(interval.meeting_days.upper()))


def room_utilization(department_id: str, sections: Iterable[ClassSection]) -> UtilizationReport:
    """Per-room occupancy for active sections, flagging overlapping pairs."""
    groups: dict[str, list[ClassSection]] = defaultdict(list)
    unplaced = 0
    for section in sections:
        if section.department_id != department_id or not section.is_active:
            continue
        if not section.has_physical_room:
            unplaced += 1
            continue
        groups[section.room].append(section)

    rooms: list[RoomUtilization] = []
    for room in sorted(groups):
        ordered = sort_schedule(groups[room], SortCriterion.room)
        intervals = [_interval(section) for section in ordered]
        anomalies: list[UtilizationAnomaly] = []
        for i, first in enumerate(intervals):
            for second in intervals[i + 1:]:
                if first.begin_minutes is None or second.begin_minutes is None:
                    continue
                if first.end_minutes is None or second.end_minutes is None:
                    continue
                if not has_day_overlap(first.meeting_days, second.meeting_days):
                    continue
                if not intervals_overlap(first.begin_minutes, first.end_minutes, second.begin_minutes, second.end_minutes):
                    continue
                anomalies.append(
                    UtilizationAnomaly(
                        room=room,
                        first_section_id=first.section_id,
                        second_section_id=second.section_id,
                        description=f"{first.label} overlaps {second.label} in {room}",
                    )
                )
        rooms.append(
            RoomUtilization(
                room=room,
                section_count=len(intervals),
                weekly_minutes=sum(_weekly_minutes(interval) for interval in intervals),
                intervals=intervals,
                anomalies=anomalies,
            )
        )

    anomaly_count = sum(len(room.anomalies) for room in rooms)
    logger.info("Built utilization report for %s: %d room(s), %d anomaly(ies)", department_id, len(rooms), anomaly_count)
    return UtilizationReport(department_id=department_id, rooms=rooms, unplaced_sections=unplaced, anomaly_count=anomaly_count)


def status_style(section: ClassSection) -> str:
    if section.status == SectionStatus.imported:
        return STYLE_IMPORTED_UNASSIGNED if section.is_unassigned else STYLE_IMPORTED_ASSIGNED
    return STATUS_STYLES[section.status]


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, SectionStatus):
        value = value.value
    return escape(str(value))


def render_schedule_html(sections: Iterable[ClassSection], title: str) -> str:
    """An HTML table that spreadsheet tools open directly."""
    header = "".join(f"<th>{escape(label)}</th>" for label, _ in EXPORT_COLUMNS)
    row_html: list[str] = []
    for section in sections:
        cells = "".join(f"<td>{_cell(getattr(section, field))}</td>" for _, field in EXPORT_COLUMNS)
        row_html.append(f"<tr style='{status_style(section)}'>{cells}</tr>")

    return (
        "<html><head><meta charset='utf-8'/></head><body>"
        f"<h2>{escape(title)}</h2>"
        "<table border='1' cellpadding='6' cellspacing='0' style='border-collapse:collapse;font-family:Arial,sans-serif;font-size:13px;'>"
        f"<thead><tr>{header}</tr></thead>"
        "<tbody>"
        + ("".join(row_html) if row_html else f"<tr><td colspan='{len(EXPORT_COLUMNS)}'>No sections scheduled.</td></tr>")
        + "</tbody></table>"
        "</body></html>"
    )


def render_utilization_html(report: UtilizationReport) -> str:
    row_html: list[str] = []
    for room in report.rooms:
        flagged = {item.first_section_id for item in room.anomalies} | {item.second_section_id for item in room.anomalies}
        for interval in room.intervals:
            style = " style='background-color:#fee2e2;font-weight:bold;'" if interval.section_id in flagged else ""
            row_html.append(
                f"<tr{style}>"
                f"<td>{escape(room.room)}</td>"
                f"<td>{escape(interval.meeting_days)}</td>"
                f"<td>{escape(interval.begin_time)} - {escape(interval.end_time)}</td>"
                f"<td>{escape(interval.label)}</td>"
                f"<td>{escape(interval.faculty)}</td>"
                "</tr>"
            )

    return (
        "<html><head><meta charset='utf-8'/></head><body>"
        f"<h2>Room Utilization ({escape(report.department_id)})</h2>"
        f"<p>{report.anomaly_count} overlapping booking(s); {report.unplaced_sections} online/TBA section(s).</p>"
        "<table border='1' cellpadding='6' cellspacing='0' style='border-collapse:collapse;font-family:Arial,sans-serif;font-size:13px;'>"
        "<thead><tr><th>Room</th><th>Days</th><th>Time</th><th>Section</th><th>Faculty</th></tr></thead>"
        "<tbody>"
        + ("".join(row_html) if row_html else "<tr><td colspan='5'>No rooms in use.</td></tr>")
        + "</tbody></table>"
        "</body></html>"
    )
