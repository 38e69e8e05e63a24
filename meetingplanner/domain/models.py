"""
Domain models for the weekly availability grid.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

DAYS_PER_WEEK = 7


@dataclass(frozen=True, order=True)
class Slot:
    """
    One addressable cell of the weekly grid.

    Immutable and ordered (day first, then hour) so it can be used as a
    mapping key and sorted into catalog order.
    """
    day: int  # 0=Monday, 6=Sunday
    hour: int

    def __post_init__(self):
        if not 0 <= self.day < DAYS_PER_WEEK:
            raise ValueError(f"Day must be between 0 and 6, got {self.day}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hour}")

    @property
    def key(self) -> str:
        """Wire form of the slot, e.g. "0-10" for Monday 10:00."""
        return f"{self.day}-{self.hour}"

    @property
    def hour_label(self) -> str:
        """Label shown in the grid header."""
        return str(self.hour)


@dataclass(frozen=True)
class DayHours:
    """
    Operating hours of one weekday.

    Invariant: start <= end, both inclusive.
    """
    start: int
    end: int

    def __post_init__(self):
        for value in (self.start, self.end):
            if not 0 <= value <= 23:
                raise ValueError(f"Hour must be between 0 and 23, got {value}")
        if self.start > self.end:
            raise ValueError(f"Start hour {self.start} must not be after end hour {self.end}")

    def slot_count(self) -> int:
        return self.end - self.start + 1

    def hours(self) -> range:
        return range(self.start, self.end + 1)

    def contains(self, hour: int) -> bool:
        return self.start <= hour <= self.end


class SelectionState(Mapping):
    """
    Immutable mapping of Slot -> frozenset of participant indices.

    Slots whose set would be empty are never stored, so a missing key means
    "nobody selected this slot". Every change produces a new SelectionState;
    instances handed out earlier keep their contents.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Mapping] = None):
        pruned: Dict[Slot, FrozenSet[int]] = {}

        for slot, members in (cells or {}).items():
            if not isinstance(slot, Slot):
                raise TypeError(f"SelectionState keys must be Slot instances, got {slot!r}")
            frozen = frozenset(members)
            if frozen:
                pruned[slot] = frozen

        self._cells = pruned

    @classmethod
    def empty(cls) -> "SelectionState":
        return cls()

    def __getitem__(self, slot: Slot) -> FrozenSet[int]:
        return self._cells[slot]

    def __iter__(self) -> Iterator[Slot]:
        return iter(sorted(self._cells))

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        body = ", ".join(
            f"{slot.key}: {sorted(self._cells[slot])}" for slot in self
        )
        return f"SelectionState({{{body}}})"

    def members(self, slot: Slot) -> FrozenSet[int]:
        """Participants who selected the slot (empty when nobody did)."""
        return self._cells.get(slot, frozenset())

    def with_members(self, slot: Slot, members: Iterable[int]) -> "SelectionState":
        """Return a copy where ``slot`` holds exactly ``members``."""
        cells = dict(self._cells)
        cells[slot] = frozenset(members)
        return SelectionState(cells)

    def participants(self) -> List[int]:
        """All participant indices that appear anywhere in the state."""
        seen = set()
        for members in self._cells.values():
            seen.update(members)
        return sorted(seen)
