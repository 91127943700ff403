import pytest

from termplan.services.time_model import (
    UNPARSEABLE_TIME,
    day_code,
    day_name,
    day_sort_value,
    days_to_codes,
    format_minutes,
    has_day_overlap,
    has_time_overlap,
    intervals_overlap,
    parse_time_minutes,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("9:30 AM", 570),
        ("12:00 AM", 0),
        ("12:00 PM", 720),
        ("12:45 pm", 765),
        ("1:05 PM", 785),
        ("11:59 PM", 1439),
        ("10:45am", 645),
    ],
)
def test_parse_time_minutes(value, expected):
    assert parse_time_minutes(value) == expected


@pytest.mark.parametrize("value", ["", None, "noon", "9:30", "13:00 PM", "0:30 AM", "9:75 AM", "TBA"])
def test_unparseable_times_use_sentinel(value):
    assert parse_time_minutes(value) == UNPARSEABLE_TIME


def test_every_valid_time_is_within_a_day():
    for hour in range(1, 13):
        for minute in (0, 15, 59):
            for period in ("AM", "PM"):
                assert 0 <= parse_time_minutes(f"{hour}:{minute:02d} {period}") <= 1439


def test_format_minutes_round_trips_display():
    assert format_minutes(570) == "9:30 AM"
    assert format_minutes(0) == "12:00 AM"
    assert format_minutes(720) == "12:00 PM"
    assert format_minutes(UNPARSEABLE_TIME) == ""


def test_day_codes():
    assert day_code("Thu") == "R"
    assert day_code("Sun") == "U"
    assert day_code("Someday") == ""
    assert day_name("R") == "Thu"
    assert days_to_codes(["Mon", "Wed", "Fri"]) == "MWF"
    assert days_to_codes(["Thu", "Tue", "Tue"]) == "TR"


def test_day_sort_value_uses_earliest_day():
    assert day_sort_value("WF") == 2
    assert day_sort_value("TR") == 1
    assert day_sort_value("") == 8
    assert day_sort_value("XYZ") == 8


def test_day_overlap_is_case_insensitive():
    assert has_day_overlap("MW", "m")
    assert not has_day_overlap("MW", "TR")
    assert not has_day_overlap("", "MW")


def test_time_overlap():
    assert has_time_overlap("9:00 AM", "10:00 AM", "9:30 AM", "10:30 AM")
    # touching intervals do not overlap
    assert not has_time_overlap("9:00 AM", "10:00 AM", "10:00 AM", "11:00 AM")
    assert not has_time_overlap("9:00 AM", "TBA", "9:30 AM", "10:30 AM")


def test_degenerate_intervals_never_overlap():
    assert not intervals_overlap(600, 600, 500, 700)
    assert not intervals_overlap(UNPARSEABLE_TIME, UNPARSEABLE_TIME, 0, UNPARSEABLE_TIME)
