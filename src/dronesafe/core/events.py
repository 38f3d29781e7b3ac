"""Append-only cumulative event history."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")


class EventLog(Generic[T]):
    """Cumulative log of analysis events.

    With ``max_entries`` set, the oldest entries are evicted once the cap is
    reached and counted in :attr:`dropped`. Without it the log is unbounded.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self.max_entries = max_entries
        self._entries: Deque[T] = deque(maxlen=max_entries)
        self.dropped = 0
        self.total = 0

    def append(self, entry: T) -> None:
        if self.max_entries is not None and len(self._entries) == self.max_entries:
            self.dropped += 1
        self._entries.append(entry)
        self.total += 1

    def extend(self, entries: Iterable[T]) -> None:
        for entry in entries:
            self.append(entry)

    @property
    def entries(self) -> Tuple[T, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> T:
        return self._entries[index]
