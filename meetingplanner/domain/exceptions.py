"""
Domain-specific exception hierarchy for the meeting planner application.
"""


class MeetingPlannerError(Exception):
    """Base class for all application-level errors."""


class SlotIndexError(MeetingPlannerError, IndexError):
    """Raised when a slot index or (day, hour) pair is outside the slot catalog."""


class InvalidIdentifierError(MeetingPlannerError, ValueError):
    """Raised when a meeting id or week-start timestamp is malformed."""


class StoreError(MeetingPlannerError):
    """Raised when persisted state cannot be read or written."""


class UnknownParticipantError(MeetingPlannerError, ValueError):
    """Raised when a participant name or number is not in the roster."""
