from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Tuple

from chronos.core.actions import ActionTotal
from chronos.core.modes import ModeTotal
from chronos.core.session_log import LogEntry


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def _fmt_datetime(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def _fmt_clock(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%H:%M:%S")


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable copy of a session, logs oldest first."""
    subject: str
    session_start: float
    session_end: float
    modes: Tuple[ModeTotal, ...]
    actions: Tuple[ActionTotal, ...]
    logs: Tuple[LogEntry, ...]

    @property
    def duration_s(self) -> int:
        return max(0, int(self.session_end - self.session_start))

    def to_dict(self) -> Dict[str, Any]:
        # Shape sent to the model; timestamps in epoch milliseconds
        return {
            "subject": self.subject,
            "sessionStart": int(self.session_start * 1000),
            "sessionEnd": int(self.session_end * 1000),
            "modes": [{"name": m.name, "totalTime": m.total_seconds} for m in self.modes],
            "actions": [{"name": a.name, "count": a.count} for a in self.actions],
            "logs": [
                {"timestamp": int(e.timestamp * 1000), "message": e.message, "type": e.kind.value}
                for e in self.logs
            ],
        }

    def to_text(self) -> str:
        lines = [
            "Chronos AI observation log",
            f"Subject: {self.subject}",
            f"Start time: {_fmt_datetime(self.session_start)}",
            f"End time: {_fmt_datetime(self.session_end)}",
            "",
            "--- Teaching mode timers ---",
        ]
        lines += [f"{m.name}: {format_time(m.total_seconds)}" for m in self.modes]
        lines += ["", "--- Teaching action counts ---"]
        lines += [f"{a.name}: {a.count} times" for a in self.actions]
        lines += ["", "--- Event log ---"]
        lines += [f"[{_fmt_clock(e.timestamp)}] {e.message}" for e in self.logs]
        return "\n".join(lines) + "\n"
