"""
Catalog of addressable (day, hour) slots.

The catalog is derived from a fixed table of per-weekday operating hours.
Slots are regenerated on every call, so the sequence is deterministic and
never cached as state.
"""

from typing import List, Sequence, Tuple, Union

from .exceptions import SlotIndexError
from .models import DAYS_PER_WEEK, DayHours, Slot

# Inclusive [start, end] per weekday, Monday first
DEFAULT_HOURS_BY_DAY: Tuple[Tuple[int, int], ...] = (
    (10, 16),
    (10, 20),
    (10, 20),
    (10, 20),
    (10, 20),
    (10, 19),
    (10, 19),
)


class SlotCatalog:
    """
    Ordered sequence of slots: day 0..6, hours ascending within each day.

    Catalog indices are what range edits operate on, so the ordering here is
    part of the stored-state contract.
    """

    def __init__(
        self,
        hours_by_day: Sequence[Union[DayHours, Tuple[int, int]]] = DEFAULT_HOURS_BY_DAY
    ):
        if len(hours_by_day) != DAYS_PER_WEEK:
            raise ValueError(
                f"Expected operating hours for {DAYS_PER_WEEK} days, got {len(hours_by_day)}"
            )

        self._hours: Tuple[DayHours, ...] = tuple(
            entry if isinstance(entry, DayHours) else DayHours(*entry)
            for entry in hours_by_day
        )

    def hours_for(self, day: int) -> DayHours:
        """Operating hours of a weekday (0=Monday)."""
        if not 0 <= day < DAYS_PER_WEEK:
            raise ValueError(f"Day must be between 0 and 6, got {day}")
        return self._hours[day]

    def build_slots(self) -> List[Slot]:
        return [
            Slot(day=day, hour=hour)
            for day, day_hours in enumerate(self._hours)
            for hour in day_hours.hours()
        ]

    def day_slot_count(self, day: int) -> int:
        return self.hours_for(day).slot_count()

    def is_first_hour_of_day(self, slot: Slot) -> bool:
        """True for the opening hour of the slot's day."""
        return slot.hour == self.hours_for(slot.day).start

    def contains(self, slot: Slot) -> bool:
        return self.hours_for(slot.day).contains(slot.hour)

    def slot_at(self, index: int) -> Slot:
        """
        Slot at a catalog index.

        Raises:
            SlotIndexError: If the index is negative or past the last slot
        """
        if index < 0:
            raise SlotIndexError(f"Slot index must not be negative, got {index}")

        remaining = index
        for day, day_hours in enumerate(self._hours):
            count = day_hours.slot_count()
            if remaining < count:
                return Slot(day=day, hour=day_hours.start + remaining)
            remaining -= count

        raise SlotIndexError(f"Slot index {index} is out of range (0..{len(self) - 1})")

    def index_of(self, day: int, hour: int) -> int:
        """
        Catalog index of a (day, hour) pair.

        Raises:
            SlotIndexError: If the pair is outside the operating hours
        """
        if not 0 <= day < DAYS_PER_WEEK or not self._hours[day].contains(hour):
            raise SlotIndexError(f"No slot for day {day} at hour {hour}")

        offset = sum(day_hours.slot_count() for day_hours in self._hours[:day])
        return offset + hour - self._hours[day].start

    def __len__(self) -> int:
        return sum(day_hours.slot_count() for day_hours in self._hours)


DEFAULT_CATALOG = SlotCatalog()


def build_slots() -> List[Slot]:
    """Slots of the default catalog, in catalog order."""
    return DEFAULT_CATALOG.build_slots()


def day_slot_count(day: int) -> int:
    return DEFAULT_CATALOG.day_slot_count(day)


def is_first_hour_of_day(slot: Slot) -> bool:
    return DEFAULT_CATALOG.is_first_hour_of_day(slot)
