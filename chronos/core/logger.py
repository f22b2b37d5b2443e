import csv
from datetime import datetime
from pathlib import Path

from chronos.core.session_log import LogEntry


class SessionLogger:
    """CSV trail of every log entry, written as it happens (survives a crash)."""

    def __init__(self, out_dir: str = "logs"):
        Path(out_dir).mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.path = Path(out_dir) / f"session_{ts}.csv"

        self._file = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(["timestamp", "kind", "message"])

    def log(self, entry: LogEntry):
        ts = datetime.fromtimestamp(entry.timestamp).isoformat(timespec="seconds")
        self._writer.writerow([ts, entry.kind.value, entry.message])
        self._file.flush()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self):
        if not self._file.closed:
            self._file.close()
