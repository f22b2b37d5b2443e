from datetime import datetime
from pathlib import Path
from typing import Optional

from chronos.core.snapshot import SessionSnapshot


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    stamp = now.isoformat().replace(":", "-").replace(".", "-")
    return f"Chronos-AI-Log-{stamp}.txt"


def write_text_export(snapshot: SessionSnapshot, directory: Path, now: Optional[datetime] = None) -> Path:
    """Write the plain-text log with a UTF-8 BOM (opens correctly in Notepad)."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(now)

    tmp = path.with_suffix(".tmp")
    with tmp.open("w", encoding="utf-8-sig", newline="") as f:
        f.write(snapshot.to_text())
    tmp.replace(path)
    return path
