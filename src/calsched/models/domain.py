"""Candidate-date domains for meeting variables."""
from datetime import date, timedelta
from typing import Callable, Iterable, Iterator, List, Set


class MeetingDomain:
    """Mutable set of dates still possible for one meeting. Values are only ever removed."""

    def __init__(self, values: Iterable[date] = ()):
        self.values: Set[date] = set(values)

    @classmethod
    def from_range(cls, start: date, end: date) -> "MeetingDomain":
        """Every date in the inclusive window ``[start, end]``."""
        return cls(date_range(start, end))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[date]:
        return iter(self.values)

    def __contains__(self, value: date) -> bool:
        return value in self.values

    def __eq__(self, other) -> bool:
        if isinstance(other, MeetingDomain):
            return self.values == other.values
        return NotImplemented

    def __repr__(self) -> str:
        if not self.values:
            return "MeetingDomain(empty)"
        return f"MeetingDomain({len(self.values)} dates, {min(self.values)}..{max(self.values)})"

    @property
    def is_empty(self) -> bool:
        return not self.values

    def remove(self, value: date) -> None:
        self.values.discard(value)

    def retain(self, keep: Callable[[date], bool]) -> int:
        """Drop every date for which ``keep`` is false; return how many were dropped."""
        dropped = [d for d in self.values if not keep(d)]
        for d in dropped:
            self.values.discard(d)
        return len(dropped)

    def sorted(self) -> List[date]:
        return sorted(self.values)

    def copy(self) -> "MeetingDomain":
        return MeetingDomain(self.values)


def date_range(start: date, end: date) -> List[date]:
    """Inclusive list of consecutive days; empty when ``start > end``."""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def build_domains(n_meetings: int, start: date, end: date) -> List[MeetingDomain]:
    """One full-window domain per meeting, indexed by meeting number."""
    return [MeetingDomain.from_range(start, end) for _ in range(n_meetings)]
