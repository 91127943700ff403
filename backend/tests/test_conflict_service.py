from termplan.services.conflict_service import ConflictService, detect_conflicts, free_rooms_for
from termplan.schemas.section import SectionStatus


def test_detect_room_conflict_is_symmetric(make_section):
    first = make_section(id="s1", meeting_days="MW", begin_time="9:00 AM", end_time="10:00 AM")
    second = make_section(id="s2", course_number="210", section="02", meeting_days="M", begin_time="9:30 AM", end_time="10:30 AM")
    sections = [first, second]

    assert detect_conflicts(first, sections) == ["Room conflict with MCSI 210 (Sec 02)"]
    assert detect_conflicts(second, sections) == ["Room conflict with MCSI 200 (Sec 01)"]


def test_online_section_is_exempt(make_section):
    first = make_section(id="s1", room="ONLINE")
    second = make_section(id="s2", meeting_days="M", begin_time="9:30 AM", end_time="10:30 AM")
    sections = [first, second]

    assert detect_conflicts(first, sections) == []
    assert detect_conflicts(second, sections) == []


def test_missing_meeting_pattern_is_exempt(make_section):
    first = make_section(id="s1", begin_time="")
    second = make_section(id="s2")
    assert detect_conflicts(first, [first, second]) == []


def test_self_is_never_a_conflict(make_section):
    section = make_section(id="s1")
    assert detect_conflicts(section, [section]) == []


def test_other_departments_do_not_interfere(make_section):
    first = make_section(id="s1")
    second = make_section(id="s2", department_id="dept-b")
    assert detect_conflicts(first, [first, second]) == []


def test_deleted_sections_do_not_occupy_rooms(make_section):
    first = make_section(id="s1")
    second = make_section(id="s2", status=SectionStatus.delete)
    assert detect_conflicts(first, [first, second]) == []


def test_no_conflict_on_disjoint_days(make_section):
    first = make_section(id="s1", meeting_days="MW")
    second = make_section(id="s2", meeting_days="TR")
    assert detect_conflicts(first, [first, second]) == []


def test_free_rooms(make_section):
    candidate = make_section(id="s1", room="")
    busy = make_section(id="s2", room="CAT 201")
    later = make_section(id="s3", room="CAT 105", begin_time="11:00 AM", end_time="12:00 PM")
    rooms = ["CAT 105", "CAT 201", "LIB 3"]

    assert free_rooms_for(candidate, rooms, [candidate, busy, later]) == ["CAT 105", "LIB 3"]


def test_free_rooms_ignores_own_booking(make_section):
    candidate = make_section(id="s1", room="CAT 201")
    assert free_rooms_for(candidate, ["CAT 201"], [candidate]) == ["CAT 201"]


def test_free_rooms_empty_without_meeting_pattern(make_section):
    candidate = make_section(id="s1", meeting_days="")
    assert free_rooms_for(candidate, ["CAT 201"], [candidate]) == []


def test_full_sweep_reports_each_pair_once(make_section):
    sections = [
        make_section(id="s1"),
        make_section(id="s2", meeting_days="M", begin_time="9:30 AM", end_time="10:30 AM"),
        make_section(id="s3", room="CAT 105"),
        make_section(id="s4", room="TBA"),
    ]
    report = ConflictService(sections).detect_conflicts()

    assert len(report.conflicts) == 1
    conflict = report.conflicts[0]
    assert conflict.conflict_type == "room_conflict"
    assert conflict.severity == "soft"
    assert conflict.room == "CAT 201"
    assert set(conflict.affected_sections) == {"s1", "s2"}


def test_conflicts_by_section(make_section):
    sections = [make_section(id="s1"), make_section(id="s2"), make_section(id="s3", room="CAT 105")]
    by_section = ConflictService(sections).conflicts_by_section()
    assert len(by_section["s1"]) == 1
    assert len(by_section["s2"]) == 1
    assert by_section["s3"] == []
