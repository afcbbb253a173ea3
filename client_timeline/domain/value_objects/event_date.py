"""
Event date and time value helpers.

Event dates are displayed as ``DD/MM`` (no year) or ``DD/MM/YYYY``; the
sentinel ``--/--`` means "unset". Year-less dates are read in the current
year, and comparisons between events deliberately ignore the year.
"""

import re
from datetime import date

from client_timeline.domain.exceptions import InvalidEventDateError, ValidationException

UNSET_DATE = "--/--"

_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})(?:/(\d{4}))?$")
_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

# Any leap year works; only used to check that a day exists in its month
_LEAP_YEAR = 2000


def is_unset_date(value: str | None) -> bool:
    """Check whether a date string is the "unset" sentinel (or empty)"""
    return not value or value.strip() == UNSET_DATE


def _day_month(value: str) -> tuple[int, int, int | None]:
    match = _DATE_PATTERN.match(value.strip())
    if not match:
        raise InvalidEventDateError(value)

    day, month = int(match.group(1)), int(match.group(2))
    year = int(match.group(3)) if match.group(3) else None
    try:
        date(year or _LEAP_YEAR, month, day)
    except ValueError as e:
        raise InvalidEventDateError(value) from e
    return day, month, year


def validate_event_date(value: str) -> str:
    """
    Validate an event date string.

    Returns the stripped value, or ``UNSET_DATE`` for an unset date.

    Raises:
        InvalidEventDateError: If the value is set but cannot be parsed
    """
    if is_unset_date(value):
        return UNSET_DATE
    _day_month(value)
    return value.strip()


def parse_event_date(value: str | None, today: date | None = None) -> date | None:
    """
    Convert an event date string to a calendar date.

    ``DD/MM`` is read in the current year (or the year of ``today``).
    Returns None for an unset date.

    Raises:
        InvalidEventDateError: If the value is set but cannot be parsed
    """
    if value is None or is_unset_date(value):
        return None

    day, month, year = _day_month(value)
    if year is None:
        year = (today or date.today()).year
    try:
        return date(year, month, day)
    except ValueError:
        # 29/02 outside a leap year rolls over to 1 March
        return date(year, 3, 1)


def format_event_date(value: date | None) -> str:
    """Format a calendar date as ``DD/MM``; None formats as the unset sentinel"""
    if value is None:
        return UNSET_DATE
    return f"{value.day:02d}/{value.month:02d}"


def normalized_event_date(value: str | None) -> tuple[int, int] | None:
    """
    Reduce an event date to ``(day, month)``, dropping any year.

    Two events dated ``05/03`` and ``05/03/2019`` normalize to the same key.
    Returns None for an unset date.

    Raises:
        InvalidEventDateError: If the value is set but cannot be parsed
    """
    if value is None or is_unset_date(value):
        return None
    day, month, _ = _day_month(value)
    return day, month


def validate_event_time(value: str | None) -> str | None:
    """Validate an optional ``HH:MM`` time string"""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not _TIME_PATTERN.match(value):
        raise ValidationException(f"Invalid event time: {value!r}", field="time")
    return value
