"""
Calendar arithmetic for week-based state buckets.

All week starts are Mondays at local midnight. Functions that need "now"
read the clock once per call and accept an injected ``today`` instead.
"""

import re
from datetime import date, datetime
from typing import Optional, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidIdentifierError

WEEK_LABEL_PREFIX = "Nädal"

_WEEK_NUMBER_PATTERN = re.compile(r"^\d+$")
# D.M, D.M. or D.M.YY / D.M.YYYY
_DATE_PATTERN = re.compile(r"^(\d{1,2})\.(\d{1,2})(?:\.(\d{4}|\d{2})?)?$")

DateLike = Union[date, datetime]


def _as_local(value: DateLike) -> DateTime:
    """Convert a stdlib date/datetime to a pendulum DateTime in local time."""
    if isinstance(value, DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value, tz=pendulum.local_timezone())
    return pendulum.local(value.year, value.month, value.day)


def _monday_of(value: DateTime) -> DateTime:
    """Monday of the week containing ``value`` at local midnight."""
    return value.start_of("day").subtract(days=value.weekday())


def current_week_start(today: Optional[DateLike] = None) -> DateTime:
    """Return the Monday of the current (or injected) week."""
    now = _as_local(today) if today is not None else pendulum.now()
    return _monday_of(now)


def resolve_week_start(text: Optional[str], today: Optional[DateLike] = None) -> Optional[DateTime]:
    """
    Resolve free-text week input to the Monday that starts the week.

    Accepted forms:
        "6"          -> week 6 of the current year
        "3.2.2025"   -> the week containing 3 February 2025
        "3.2.25"     -> same, two-digit years map to 20xx
        "3.2"        -> 3 February of the current year

    Returns None for empty or unrecognised input, so the caller can keep the
    week it is currently showing. Never raises.
    """
    value = (text or "").strip()
    if not value:
        return None

    now = _as_local(today) if today is not None else pendulum.now()

    if _WEEK_NUMBER_PATTERN.match(value):
        week_number = int(value)
        if not 1 <= week_number <= 53:
            return None

        jan1 = pendulum.local(now.year, 1, 1)
        return _monday_of(jan1).add(days=(week_number - 1) * 7)

    match = _DATE_PATTERN.match(value)
    if not match:
        return None

    day = int(match.group(1))
    month = int(match.group(2))
    year = int(match.group(3)) if match.group(3) else now.year
    if year < 100:
        year += 2000

    try:
        parsed = pendulum.local(year, month, day)
    except ValueError:
        return None

    return _monday_of(parsed)


def format_date(value: DateLike) -> str:
    """Format as D.M.YYYY without zero padding, e.g. "15.1.2025"."""
    return f"{value.day}.{value.month}.{value.year}"


def iso_week_number(value: DateLike) -> int:
    """
    ISO-8601 week number (1..53).

    The week belongs to the year of its Thursday, so shift to that Thursday
    and count whole weeks from its January 1st.
    """
    thursday = _as_local(value).start_of("day").add(days=3 - value.weekday())
    return (thursday.day_of_year - 1) // 7 + 1


def week_label(start: DateLike) -> str:
    """Human-readable label, e.g. "Nädal 2 • 6.1.2025 – 12.1.2025"."""
    start = _as_local(start)
    end = start.add(days=6)
    return (
        f"{WEEK_LABEL_PREFIX} {iso_week_number(start)} • "
        f"{format_date(start)} – {format_date(end)}"
    )


def week_start_timestamp(start: DateLike) -> str:
    """
    Store key for a week: epoch milliseconds of its Monday, as a string.

    Raises:
        InvalidIdentifierError: If the week start lies before the epoch
    """
    millis = _as_local(start).int_timestamp * 1000
    if millis < 0:
        raise InvalidIdentifierError(f"Week start {start} lies before the epoch")
    return str(millis)
