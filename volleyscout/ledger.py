import time
import uuid
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from volleyscout.models import LogEntry


def now_millis(clock: Callable[[], float] = time.time) -> int:
    return int(clock() * 1000)


def new_entry_id() -> str:
    return uuid.uuid4().hex


class EventLedger:
    """
    Append-only chronological record of committed events.

    append() never touches the receiver; it returns a new ledger, so a
    GameState snapshot keeps exactly the entries it was taken with.
    LogEntry objects are shared between ledgers, the backing tuple is not.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[LogEntry] = ()):
        self._entries: Tuple[LogEntry, ...] = tuple(entries)

    def append(self, entry: LogEntry) -> "EventLedger":
        if not isinstance(entry, LogEntry):
            raise TypeError("EventLedger only accepts LogEntry records")
        return EventLedger(self._entries + (entry,))

    def last(self) -> Optional[LogEntry]:
        return self._entries[-1] if self._entries else None

    def for_set(self, set_number: int) -> List[LogEntry]:
        return [e for e in self._entries if e.set_number == set_number]

    def set_numbers(self) -> List[int]:
        return sorted({e.set_number for e in self._entries})

    # ---------------------------------------------------------
    # Sequence protocol
    # ---------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, EventLedger):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"EventLedger({len(self._entries)} entries)"

    # ---------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    @staticmethod
    def from_list(items: Iterable[Dict[str, Any]]) -> "EventLedger":
        return EventLedger(LogEntry.from_dict(d) for d in items)
