"""Unit tests for registration form sanitizers."""

import pytest

from app.utils.form_sanitizers import (
    clamp_attendees,
    clean_text,
    find_missing_fields,
    normalize_phone,
    parse_leading_int,
)


class TestFindMissingFields:
    def test_reports_empty_and_absent_fields_in_required_order(self) -> None:
        values = {"email": "  ", "fullName": "Jane", "phone": None}

        assert find_missing_fields(values, ["fullName", "email", "phone", "attendees"]) == [
            "email",
            "phone",
            "attendees",
        ]

    def test_nothing_missing(self) -> None:
        assert find_missing_fields({"a": "1", "b": "x"}, ["a", "b"]) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+254 (705) 874-715", "+254705874715"),
        ("0705.874.715 ext", "0705874715"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone(raw, expected) -> None:
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), (" 12abc", 12), ("-2", -2), ("abc", 0), ("", 0), (None, 0), ("2.9", 2)],
)
def test_parse_leading_int(raw, expected) -> None:
    assert parse_leading_int(raw) == expected


@pytest.mark.parametrize(("raw", "expected"), [("0", 1), ("-5", 1), ("7", 7), ("500", 20)])
def test_clamp_attendees(raw: str, expected: int) -> None:
    assert clamp_attendees(raw, minimum=1, maximum=20) == expected


def test_clean_text() -> None:
    assert clean_text("  Jane Doe \n") == "Jane Doe"
    assert clean_text(None) == ""
