"""
Identifier checks shared by all state stores.
"""

import re

from ..domain.exceptions import InvalidIdentifierError

# Matched with fullmatch, ASCII digits only
MEETING_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")
WEEK_START_PATTERN = re.compile(r"[0-9]+")


def validate_meeting_id(meeting_id: str) -> str:
    if not isinstance(meeting_id, str) or not MEETING_ID_PATTERN.fullmatch(meeting_id):
        raise InvalidIdentifierError(f"Invalid meeting ID: {meeting_id!r}")
    return meeting_id


def validate_week_start(week_start: str) -> str:
    """Week starts are epoch milliseconds as a non-negative integer string."""
    if not isinstance(week_start, str) or not WEEK_START_PATTERN.fullmatch(week_start):
        raise InvalidIdentifierError(f"Missing or invalid weekStart: {week_start!r}")
    return week_start


def validate_key(meeting_id: str, week_start: str) -> None:
    validate_meeting_id(meeting_id)
    validate_week_start(week_start)
