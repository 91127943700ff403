from termplan.schemas.section import SectionStatus
from termplan.services.csv_import import find_header_index, parse_schedule_csv, split_csv_line

HEADER = "Term,Subject,Course,Section,Title,Notes,End Date,Method,Days,Begin,End,Room,Faculty"


def test_imports_row_with_unquoted_faculty_name():
    text = f"{HEADER}\n2026MFA,MCSI,200,01,Programming 1,,,LEC,MW,9:30 AM,10:45 AM,CAT 201,Smith, Jane\n"
    sections = parse_schedule_csv(text, "dept-a")

    assert len(sections) == 1
    section = sections[0]
    assert section.subject == "MCSI"
    assert section.course_number == "200"
    assert section.section == "01"
    assert section.title == "Programming 1"
    assert section.meeting_days == "MW"
    assert section.begin_time == "9:30 AM"
    assert section.room == "CAT 201"
    assert section.faculty == "Smith, Jane"
    assert section.status == SectionStatus.imported
    assert section.department_id == "dept-a"


def test_quoted_fields_keep_commas():
    assert split_csv_line('a,"b, c",d') == ["a", "b, c", "d"]
    text = f'{HEADER}\r\n2026MFA,MCSI,310,01,"Data, Models",,,LEC,TR,1:00 PM,2:15 PM,CAT 105,"Lee, Ann"\r\n'
    section = parse_schedule_csv(text, "dept-a")[0]
    assert section.title == "Data, Models"
    assert section.faculty == "Lee, Ann"


def test_header_found_after_leading_garbage():
    lines = ["Schedule export", "", "TERM,SUBJECT,COURSE", "2026MFA,MCSI,200,01,Programming 1"]
    assert find_header_index(lines) == 2
    sections = parse_schedule_csv("\n".join(lines), "dept-a")
    assert [section.course_number for section in sections] == ["200"]


def test_missing_header_parses_from_first_line():
    text = "2026MFA,MCSI,200,01,Programming 1\n2026MFA,MCSI,201,01,Programming 2"
    assert [section.course_number for section in parse_schedule_csv(text, "dept-a")] == ["200", "201"]


def test_blank_and_comma_only_lines_are_skipped():
    text = f"{HEADER}\n\n,,,,,,\n2026MFA,MCSI,200,01,Programming 1\n   \n"
    assert len(parse_schedule_csv(text, "dept-a")) == 1


def test_short_rows_are_dropped():
    text = f"{HEADER}\n2026MFA,MCSI,200\n2026MFA,MCSI,200,01,Programming 1"
    assert len(parse_schedule_csv(text, "dept-a")) == 1


def test_missing_trailing_columns_default():
    section = parse_schedule_csv(f"{HEADER}\n2026MFA,MCSI,200,01,Programming 1", "dept-a")[0]
    assert section.room == ""
    assert section.meeting_days == ""
    assert section.notes is None
    assert section.faculty == "Staff"


def test_every_row_gets_fresh_identity():
    text = f"{HEADER}\n2026MFA,MCSI,200,01,Programming 1\n2026MFA,MCSI,200,01,Programming 1"
    first, second = parse_schedule_csv(text, "dept-a")
    assert first.id != second.id


def test_garbage_input_never_raises():
    assert parse_schedule_csv("", "dept-a") == []
    assert parse_schedule_csv('"unterminated,quote\n\x00', "dept-a") == []


def test_trailing_commas_do_not_leak_into_faculty():
    text = f"{HEADER}\n2026MFA,MCSI,200,01,Prog,,,LEC,MW,9:30 AM,10:45 AM,CAT 201,Jones,\n"
    assert parse_schedule_csv(text, "dept-a")[0].faculty == "Jones"

    padded = f"{HEADER}\n2026MFA,MCSI,200,01,Prog,,,LEC,MW,9:30 AM,10:45 AM,CAT 201,Smith, Jane,,\n"
    assert parse_schedule_csv(padded, "dept-a")[0].faculty == "Smith, Jane"

    empty = f"{HEADER}\n2026MFA,MCSI,200,01,Prog,,,LEC,MW,9:30 AM,10:45 AM,CAT 201,,\n"
    assert parse_schedule_csv(empty, "dept-a")[0].faculty == "Staff"
