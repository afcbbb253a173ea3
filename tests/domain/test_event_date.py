"""Tests for event date and time helpers"""

from datetime import date

import pytest
from freezegun import freeze_time

from client_timeline.domain.exceptions import InvalidEventDateError, ValidationException
from client_timeline.domain.value_objects.event_date import (UNSET_DATE, format_event_date,
                                                             is_unset_date,
                                                             normalized_event_date,
                                                             parse_event_date,
                                                             validate_event_date,
                                                             validate_event_time)


class TestParseEventDate:
    def test_day_month_uses_given_year(self):
        assert parse_event_date("05/03", today=date(2024, 1, 1)) == date(2024, 3, 5)

    @freeze_time("2025-06-01")
    def test_day_month_defaults_to_current_year(self):
        assert parse_event_date("05/03") == date(2025, 3, 5)

    def test_full_date_keeps_its_year(self):
        assert parse_event_date("05/03/2019", today=date(2024, 1, 1)) == date(2019, 3, 5)

    def test_single_digit_parts(self):
        assert parse_event_date("5/3", today=date(2024, 1, 1)) == date(2024, 3, 5)

    @pytest.mark.parametrize("value", [UNSET_DATE, "", None, "  --/--  "])
    def test_unset_returns_none(self, value):
        assert parse_event_date(value) is None

    def test_leap_day_outside_leap_year_rolls_over(self):
        assert parse_event_date("29/02", today=date(2023, 5, 1)) == date(2023, 3, 1)
        assert parse_event_date("29/02", today=date(2024, 5, 1)) == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["abc", "32/01", "00/05", "31/04", "12/13", "05-03", "05/03/19"])
    def test_malformed_dates_raise(self, value):
        with pytest.raises(InvalidEventDateError) as exc_info:
            parse_event_date(value)
        assert exc_info.value.details["field"] == "date"
        assert exc_info.value.error_code == "VALIDATION_ERROR"


class TestFormatEventDate:
    def test_formats_day_and_month(self):
        assert format_event_date(date(2024, 3, 5)) == "05/03"

    def test_none_formats_as_unset(self):
        assert format_event_date(None) == UNSET_DATE


class TestNormalizedEventDate:
    def test_year_is_ignored(self):
        assert normalized_event_date("05/03") == normalized_event_date("05/03/2019") == (5, 3)

    def test_unset_has_no_key(self):
        assert normalized_event_date(UNSET_DATE) is None
        assert is_unset_date(UNSET_DATE)
        assert not is_unset_date("05/03")


class TestValidation:
    def test_validate_event_date_strips(self):
        assert validate_event_date(" 05/03 ") == "05/03"
        assert validate_event_date("") == UNSET_DATE

    @pytest.mark.parametrize("value,expected", [("09:30", "09:30"), ("23:59", "23:59"), ("", None), (None, None)])
    def test_valid_times(self, value, expected):
        assert validate_event_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "9:30", "12:60", "noon"])
    def test_invalid_times_raise(self, value):
        with pytest.raises(ValidationException):
            validate_event_time(value)
