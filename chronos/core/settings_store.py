import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)


@dataclass
class AppSettings:
    reminder_threshold_s: int = 5 * 60
    reminder_poll_s: int = 10
    log_capacity: int = 100

    max_attempts: int = 3
    model: str = "gemini-2.5-flash"
    request_timeout_s: float = 60.0
    credential_ttl_s: int = 2 * 60 * 60

    notify_on_reminder: bool = True


def app_data_dir() -> Path:
    base = Path(QStandardPaths.writableLocation(QStandardPaths.AppDataLocation))
    base.mkdir(parents=True, exist_ok=True)
    return base


class SettingsStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = path or app_data_dir() / "settings.json"

    def load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Unreadable settings file %s, using defaults: %r", self.path, e)
            return AppSettings()

        s = AppSettings()
        if not isinstance(data, dict):
            return s
        for k, v in data.items():
            if hasattr(s, k):
                setattr(s, k, v)
        return s

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
