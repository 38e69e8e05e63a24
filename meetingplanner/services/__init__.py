"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .planner import MeetingPlannerService, StateStoreProtocol

__all__ = ["MeetingPlannerService", "StateStoreProtocol"]
