import logging
from datetime import date

import pytest

from app.services.recurrence import (
    parse_recurrence_days,
    serialize_recurrence_days,
    weekday_token,
)


@pytest.mark.parametrize("day, token", [
    (date(2024, 3, 3), "SUN"),
    (date(2024, 3, 4), "MON"),
    (date(2024, 3, 6), "WED"),
    (date(2024, 3, 9), "SAT"),
])
def test_weekday_token(day, token):
    assert weekday_token(day) == token


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_nothing_stored(raw):
    parsed = parse_recurrence_days(raw)

    assert parsed.days == frozenset()
    assert parsed.stored is False
    assert parsed.recovered is False


def test_json_list():
    parsed = parse_recurrence_days('["MON","WED"]')

    assert parsed.days == {"MON", "WED"}
    assert parsed.stored is True
    assert parsed.recovered is False


def test_json_list_is_normalized():
    assert parse_recurrence_days('[" mon ", "Fri", "XYZ"]').days == {"MON", "FRI"}


def test_double_encoded_json_is_recovered(caplog):
    raw = '"[\\"MON\\",\\"WED\\"]"'

    with caplog.at_level(logging.WARNING):
        parsed = parse_recurrence_days(raw)

    assert parsed.days == {"MON", "WED"}
    assert parsed.recovered is True
    assert "Recovered recurrence days" in caplog.text


@pytest.mark.parametrize("raw, expected", [
    ("MON,WED,FRI", {"MON", "WED", "FRI"}),
    ("tue, thu", {"TUE", "THU"}),
    ('["MON","WE', {"MON"}),
    ("{SAT}{SUN}", {"SAT", "SUN"}),
])
def test_malformed_text_is_recovered(raw, expected):
    parsed = parse_recurrence_days(raw)

    assert parsed.days == expected
    assert parsed.stored is True


def test_tokens_inside_words_are_not_matched():
    assert parse_recurrence_days("MONDAY, common, SUNDAY").days == frozenset()


def test_unreadable_text_yields_no_days(caplog):
    with caplog.at_level(logging.WARNING):
        parsed = parse_recurrence_days("{corrupt")

    assert parsed.days == frozenset()
    assert parsed.stored is True
    assert "Unreadable recurrence days" in caplog.text


def test_non_list_json_falls_back_to_extraction():
    assert parse_recurrence_days('{"days": "MON"}').days == {"MON"}


def test_serialize_uses_week_order():
    assert serialize_recurrence_days(["fri", "MON", "SUN", "MON"]) == '["SUN", "MON", "FRI"]'


def test_serialize_empty_selection():
    assert serialize_recurrence_days([]) is None
    assert serialize_recurrence_days(["XYZ"]) is None


def test_serialized_value_parses_back_cleanly():
    parsed = parse_recurrence_days(serialize_recurrence_days(["TUE", "SAT"]))

    assert parsed.days == {"TUE", "SAT"}
    assert parsed.recovered is False
