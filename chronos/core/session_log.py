from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List


class LogKind(str, Enum):
    MODE = "mode"
    ACTION = "action"
    NOTE = "note"
    ENGAGEMENT = "engagement"
    SESSION = "session"


@dataclass(frozen=True)
class LogEntry:
    timestamp: float   # epoch seconds
    message: str
    kind: LogKind


class SessionLog:
    """
    Append-only event ledger, most recent first.
    Oldest entries fall off silently once `capacity` is reached.
    """

    def __init__(self, capacity: int = 100):
        self.capacity = max(1, int(capacity))
        self._entries: deque[LogEntry] = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, message: str, kind: LogKind, timestamp: float) -> LogEntry:
        entry = LogEntry(timestamp=float(timestamp), message=message, kind=LogKind(kind))
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def chronological(self) -> List[LogEntry]:
        return list(reversed(self._entries))

    def reset(self):
        self._entries.clear()
