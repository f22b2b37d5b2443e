"""Tests for settings, session archive, text export and CSV trail."""

import csv
import json
from datetime import datetime

from chronos.core.export import export_filename, write_text_export
from chronos.core.logger import SessionLogger
from chronos.core.session_log import LogEntry, LogKind
from chronos.core.settings_store import AppSettings, SettingsStore
from chronos.core.storage import SessionRecord, SessionStore


class TestSettingsStore:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert SettingsStore(tmp_path / "settings.json").load() == AppSettings()

    def test_round_trip(self, tmp_path):
        store = SettingsStore(tmp_path / "nested" / "settings.json")
        store.save(AppSettings(reminder_threshold_s=120, model="gemini-pro"))
        loaded = store.load()
        assert loaded.reminder_threshold_s == 120
        assert loaded.model == "gemini-pro"
        assert loaded.max_attempts == 3

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"max_attempts": 5, "colour": "red"}), encoding="utf-8")
        loaded = SettingsStore(path).load()
        assert loaded.max_attempts == 5
        assert not hasattr(loaded, "colour")

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{nope", encoding="utf-8")
        assert SettingsStore(path).load() == AppSettings()


class TestSessionStore:
    def test_empty(self, tmp_path):
        assert SessionStore(tmp_path / "sessions.json").load() == []

    def test_append_snapshot(self, tmp_path, sample_snapshot):
        store = SessionStore(tmp_path / "sessions.json")
        rec = store.append_snapshot(sample_snapshot)
        store.append_snapshot(sample_snapshot)

        items = store.load()
        assert len(items) == 2
        assert items[0]["subject"] == "Mathematics"
        assert items[0]["duration_s"] == 900
        assert items[0]["modes"] == {"Lecture": 600, "Group discussion": 0}
        assert items[0]["actions"]["Positive praise"] == 3
        assert items[0]["log_entries"] == 4
        assert isinstance(rec, SessionRecord)
        assert rec.timestamp_utc.endswith("+00:00")

    def test_corrupt_archive_reads_as_empty(self, tmp_path):
        path = tmp_path / "sessions.json"
        path.write_text("garbage", encoding="utf-8")
        assert SessionStore(path).load() == []

    def test_non_record_items_skipped(self, tmp_path, sample_snapshot):
        path = tmp_path / "sessions.json"
        path.write_text(json.dumps([1, "x", None, {"subject": "History"}]), encoding="utf-8")
        store = SessionStore(path)
        assert store.load() == [{"subject": "History"}]

        store.append_snapshot(sample_snapshot)
        assert [item["subject"] for item in store.load()] == ["History", "Mathematics"]

    def test_non_list_archive_reads_as_empty(self, tmp_path):
        path = tmp_path / "sessions.json"
        path.write_text(json.dumps({"subject": "History"}), encoding="utf-8")
        assert SessionStore(path).load() == []


class TestTextExport:
    def test_filename(self):
        name = export_filename(datetime(2024, 3, 5, 14, 7, 9, 123000))
        assert name == "Chronos-AI-Log-2024-03-05T14-07-09-123000.txt"

    def test_written_with_bom(self, tmp_path, sample_snapshot):
        path = write_text_export(sample_snapshot, tmp_path, now=datetime(2024, 3, 5, 14, 7, 9))
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert raw[3:].decode("utf-8") == sample_snapshot.to_text()
        assert not list(tmp_path.glob("*.tmp"))


class TestSessionLogger:
    def test_rows_written_as_they_happen(self, tmp_path):
        trail = SessionLogger(out_dir=str(tmp_path))
        trail.log(LogEntry(1_700_000_000.0, "Lecture on", LogKind.MODE))

        with trail.path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["timestamp", "kind", "message"]
        assert rows[1][1:] == ["mode", "Lecture on"]

        trail.close()
        trail.close()
        assert trail.closed
