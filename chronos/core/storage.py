import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from chronos.core.settings_store import app_data_dir
from chronos.core.snapshot import SessionSnapshot

logger = logging.getLogger(__name__)


def sessions_path() -> Path:
    return app_data_dir() / "sessions.json"


@dataclass
class SessionRecord:
    timestamp_utc: str
    subject: str
    duration_s: int
    modes: Dict[str, int] = field(default_factory=dict)
    actions: Dict[str, int] = field(default_factory=dict)
    log_entries: int = 0
    version: int = 1

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionRecord":
        end = datetime.fromtimestamp(snapshot.session_end, tz=timezone.utc)
        return cls(
            timestamp_utc=end.isoformat(),
            subject=snapshot.subject,
            duration_s=snapshot.duration_s,
            modes={m.name: m.total_seconds for m in snapshot.modes},
            actions={a.name: a.count for a in snapshot.actions},
            log_entries=len(snapshot.logs),
        )


class SessionStore:
    """Archive of finished sessions in sessions.json (oldest first)."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or sessions_path()

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read session archive %s: %r", self.path, e)
            return []
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    def append(self, record: SessionRecord) -> None:
        items = self.load()
        items.append(asdict(record))

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
        tmp.replace(self.path)

    def append_snapshot(self, snapshot: SessionSnapshot) -> SessionRecord:
        rec = SessionRecord.from_snapshot(snapshot)
        self.append(rec)
        return rec
