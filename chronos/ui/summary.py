import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTextBrowser,
    QFileDialog, QMessageBox,
)
from PySide6.QtCore import Qt, QStandardPaths
from PySide6.QtGui import QGuiApplication

from chronos.core.export import write_text_export
from chronos.core.snapshot import SessionSnapshot, format_time
from chronos.core.storage import SessionStore
from chronos.ui.report_worker import ReportWorker
from chronos.ui.style import BUTTON_GO, BUTTON_SOFT, card

logger = logging.getLogger(__name__)

REPORT_FAILED_MD = (
    "### Report generation failed\n\n"
    "Sorry, the connection to the AI service failed. Check that your API key is "
    "correct, or try again later."
)


def _parse_iso(ts: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(ts)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _relative_day_label(dt_utc: datetime) -> str:
    now = datetime.now(timezone.utc).date()
    d = dt_utc.date()
    if d == now:
        return "Today"
    if (now.toordinal() - d.toordinal()) == 1:
        return "Yesterday"
    return dt_utc.strftime("%b %d, %Y")


class SummaryScreen(QWidget):
    def __init__(self, client, ask_for_key, on_done, store: SessionStore | None = None):
        super().__init__()
        self.client = client
        self.ask_for_key = ask_for_key
        self.on_done = on_done
        self.store = store or SessionStore()
        self.snapshot: SessionSnapshot | None = None
        self._worker: ReportWorker | None = None

        root = QVBoxLayout(self)
        root.setContentsMargins(28, 22, 28, 22)
        root.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("Observation Summary")
        title.setStyleSheet("font-size: 24px; font-weight: 800;")

        done_btn = QPushButton("Done")
        done_btn.setCursor(Qt.PointingHandCursor)
        done_btn.clicked.connect(self.on_done)
        done_btn.setStyleSheet(BUTTON_SOFT)

        header.addWidget(title, 1)
        header.addWidget(done_btn)

        # ---- Current session card
        self.current_card = card()
        cur = QVBoxLayout(self.current_card)
        cur.setContentsMargins(22, 18, 22, 18)
        cur.setSpacing(8)

        self.headline_lbl = QLabel("—")
        self.headline_lbl.setStyleSheet("font-size: 16px; font-weight: 750;")
        self.modes_lbl = QLabel("—")
        self.actions_lbl = QLabel("—")
        for lbl in (self.modes_lbl, self.actions_lbl):
            lbl.setWordWrap(True)
            lbl.setStyleSheet("font-size: 14px; font-weight: 600;")

        self.prev_lbl = QLabel("")
        self.prev_lbl.setObjectName("muted")
        self.prev_lbl.hide()

        cur.addWidget(self.headline_lbl)
        cur.addWidget(self.modes_lbl)
        cur.addWidget(self.actions_lbl)
        cur.addWidget(self.prev_lbl)

        # ---- Export + AI buttons
        btns = QHBoxLayout()
        btns.setSpacing(8)

        copy_btn = QPushButton("Copy log")
        copy_btn.setCursor(Qt.PointingHandCursor)
        copy_btn.clicked.connect(self.copy_to_clipboard)

        save_btn = QPushButton("Save as .txt")
        save_btn.setCursor(Qt.PointingHandCursor)
        save_btn.clicked.connect(self.save_txt)

        self.report_btn = QPushButton("Generate AI report")
        self.report_btn.setCursor(Qt.PointingHandCursor)
        self.report_btn.clicked.connect(self.generate_report)
        self.report_btn.setStyleSheet(BUTTON_GO)

        for b in (copy_btn, save_btn):
            b.setStyleSheet(BUTTON_SOFT)
            btns.addWidget(b)
        btns.addStretch(1)
        btns.addWidget(self.report_btn)

        # ---- Report
        self.report_view = QTextBrowser()
        self.report_view.setOpenExternalLinks(True)
        self.report_view.setPlaceholderText("The AI report will appear here.")

        root.addLayout(header)
        root.addWidget(self.current_card)
        root.addLayout(btns)
        root.addWidget(self.report_view, 1)

    # -----------------------
    # Content
    # -----------------------

    def set_snapshot(self, snapshot: SessionSnapshot):
        self.snapshot = snapshot
        self.report_view.clear()

        self.headline_lbl.setText(
            f"{snapshot.subject}  •  {format_time(snapshot.duration_s)}  •  {len(snapshot.logs)} events"
        )
        self.modes_lbl.setText(
            "Modes: " + ",  ".join(f"{m.name} {format_time(m.total_seconds)}" for m in snapshot.modes)
        )
        self.actions_lbl.setText(
            "Actions: " + ",  ".join(f"{a.name} {a.count}" for a in snapshot.actions)
        )

        # Previous session comes from the archive, so read before appending this one
        items = self.store.load()
        if items:
            prev = items[-1]
            dt_utc = _parse_iso(str(prev.get("timestamp_utc", "")))
            when = _relative_day_label(dt_utc) if dt_utc else "Recent"
            self.prev_lbl.setText(
                f"Previous: {prev.get('subject', '—')}  •  "
                f"{format_time(int(prev.get('duration_s', 0)))}  •  {when}"
            )
            self.prev_lbl.show()
        else:
            self.prev_lbl.hide()

        try:
            self.store.append_snapshot(snapshot)
        except OSError as e:
            logger.error("Could not archive session: %r", e)

    # -----------------------
    # Export
    # -----------------------

    def copy_to_clipboard(self):
        if self.snapshot is None:
            return
        QGuiApplication.clipboard().setText(self.snapshot.to_text())
        QMessageBox.information(self, "Chronos AI", "Log copied to clipboard.")

    def save_txt(self):
        if self.snapshot is None:
            return
        start_dir = QStandardPaths.writableLocation(QStandardPaths.DocumentsLocation)
        directory = QFileDialog.getExistingDirectory(self, "Save log to…", start_dir)
        if not directory:
            return
        try:
            path = write_text_export(self.snapshot, Path(directory))
        except OSError as e:
            logger.error("Saving log failed: %r", e)
            QMessageBox.warning(self, "Chronos AI", "Saving failed. Please try again.")
            return
        QMessageBox.information(self, "Chronos AI", f"Saved to {path}")

    # -----------------------
    # AI report
    # -----------------------

    def generate_report(self):
        if self.snapshot is None or self._worker is not None:
            return
        if not self.client.credentials.has_credential() and not self.ask_for_key():
            return

        self.report_btn.setEnabled(False)
        self.report_btn.setText("Generating…")
        self.report_view.setMarkdown("_Analysing the observation…_")

        self._worker = ReportWorker(self.client, "report", self.snapshot)
        self._worker.result.connect(self.report_view.setMarkdown)
        self._worker.error.connect(self._on_report_error)
        self._worker.finished.connect(self._on_report_finished)
        self._worker.start()

    def _on_report_error(self, kind: str, message: str):
        logger.error("Generating AI report failed: %s", message)
        self.report_view.setMarkdown(REPORT_FAILED_MD)
        if kind == "missing_key":
            self.ask_for_key()

    def _on_report_finished(self):
        self.report_btn.setEnabled(True)
        self.report_btn.setText("Generate AI report")
        if self._worker is not None:
            self._worker.deleteLater()
        self._worker = None

    def shutdown(self):
        if self._worker is not None and self._worker.isRunning():
            self._worker.cancel()
            self._worker.wait(500)
