import logging
from datetime import datetime

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QHBoxLayout, QPushButton, QComboBox,
    QGridLayout, QSlider, QLineEdit, QListWidget, QMessageBox,
)
from PySide6.QtCore import Qt

import pyqtgraph as pg

from chronos.core.catalog import SUBJECTS
from chronos.core.engagement import level_color, level_for
from chronos.core.logger import SessionLogger
from chronos.core.notify import notify
from chronos.core.session import Session
from chronos.core.snapshot import format_time
from chronos.ui.report_worker import ReportWorker
from chronos.ui.style import BUTTON_DANGER, BUTTON_GO, BUTTON_SOFT, card

logger = logging.getLogger(__name__)


class SessionScreen(QWidget):
    """
    Live observation screen
    - Subject picker + Start/End
    - Teaching mode toggles (several can run at once) with running totals
    - Teaching action counters
    - Engagement slider with idle reminder banner and trend chart
    - Qualitative notes (optionally polished by the AI client)
    - Event log, most recent first
    """
    def __init__(self, session: Session, client, ask_for_key, on_end):
        super().__init__()
        self.session = session
        self.client = client
        self.ask_for_key = ask_for_key
        self.on_end = on_end

        self._csv: SessionLogger | None = None
        self._closing = False
        self._polish_worker: ReportWorker | None = None
        self._trend_x: list[float] = []
        self._trend_y: list[int] = []

        # --- Header
        header = QHBoxLayout()
        header.setSpacing(12)

        title = QLabel("Live Observation")
        title.setStyleSheet("font-size: 24px; font-weight: 750; letter-spacing: 0.2px;")

        self.subject_box = QComboBox()
        self.subject_box.addItems(SUBJECTS)

        self.duration_lbl = QLabel("00:00:00")
        self.duration_lbl.setStyleSheet("font-size: 22px; font-weight: 750;")

        self.start_btn = QPushButton("Start observation")
        self.start_btn.setCursor(Qt.PointingHandCursor)
        self.start_btn.clicked.connect(self.toggle_session)
        self.start_btn.setStyleSheet(BUTTON_GO)

        header.addWidget(title, 1)
        header.addWidget(self.subject_box)
        header.addWidget(self.duration_lbl)
        header.addWidget(self.start_btn, 0, Qt.AlignRight)

        # --- Reminder banner
        self.reminder_lbl = QLabel("No engagement score for a while. Record how the class is doing.")
        self.reminder_lbl.setWordWrap(True)
        self.reminder_lbl.setStyleSheet("""
            QLabel {
                background: rgba(250,204,21,0.12);
                border: 1px solid rgba(250,204,21,0.30);
                border-radius: 12px;
                padding: 8px 12px;
                font-weight: 700;
            }
        """)
        self.reminder_lbl.hide()

        # --- Modes card
        modes_card = card()
        modes_grid = QGridLayout(modes_card)
        modes_grid.setContentsMargins(16, 14, 16, 14)
        modes_grid.setSpacing(10)

        self.mode_btns: dict[str, QPushButton] = {}
        for i, mode in enumerate(self.session.modes):
            b = QPushButton()
            b.setCheckable(True)
            b.setCursor(Qt.PointingHandCursor)
            b.clicked.connect(lambda _=False, mid=mode.id: self.session.toggle_mode(mid))
            modes_grid.addWidget(b, i // 2, i % 2)
            self.mode_btns[mode.id] = b

        # --- Actions card
        actions_card = card()
        actions_row = QHBoxLayout(actions_card)
        actions_row.setContentsMargins(16, 14, 16, 14)
        actions_row.setSpacing(8)

        self.action_btns: dict[str, QPushButton] = {}
        for action in self.session.actions:
            b = QPushButton()
            b.setCursor(Qt.PointingHandCursor)
            b.clicked.connect(lambda _=False, aid=action.id: self.session.record_action(aid))
            actions_row.addWidget(b)
            self.action_btns[action.id] = b

        # --- Engagement card
        eng_card = card()
        eng_row = QHBoxLayout(eng_card)
        eng_row.setContentsMargins(16, 14, 16, 14)
        eng_row.setSpacing(12)

        eng_title = QLabel("Engagement")
        eng_title.setObjectName("muted")

        self.eng_slider = QSlider(Qt.Horizontal)
        self.eng_slider.setRange(0, 100)
        self.eng_slider.setValue(self.session.engagement.value)
        self.eng_slider.setTracking(False)  # valueChanged on release only
        self.eng_slider.valueChanged.connect(self._on_engagement_input)
        self.eng_slider.sliderPressed.connect(self._on_slider_pressed)
        self.eng_slider.sliderReleased.connect(self._on_slider_released)
        self._pressed_at: int | None = None

        self.eng_lbl = QLabel()
        self.eng_lbl.setFixedWidth(90)

        eng_row.addWidget(eng_title)
        eng_row.addWidget(self.eng_slider, 1)
        eng_row.addWidget(self.eng_lbl)

        # --- Notes card
        note_card = card()
        note_row = QHBoxLayout(note_card)
        note_row.setContentsMargins(16, 14, 16, 14)
        note_row.setSpacing(8)

        self.note_edit = QLineEdit()
        self.note_edit.setPlaceholderText("Qualitative note…")
        self.note_edit.returnPressed.connect(self.submit_note)

        self.polish_btn = QPushButton("Polish with AI")
        self.polish_btn.setCursor(Qt.PointingHandCursor)
        self.polish_btn.clicked.connect(self.polish_note)
        self.polish_btn.setStyleSheet(BUTTON_SOFT)

        self.add_note_btn = QPushButton("Add note")
        self.add_note_btn.setCursor(Qt.PointingHandCursor)
        self.add_note_btn.clicked.connect(self.submit_note)
        self.add_note_btn.setStyleSheet(BUTTON_SOFT)

        note_row.addWidget(self.note_edit, 1)
        note_row.addWidget(self.polish_btn)
        note_row.addWidget(self.add_note_btn)

        # --- Log + trend
        bottom = QHBoxLayout()
        bottom.setSpacing(12)

        self.log_list = QListWidget()
        self.log_list.setMinimumHeight(160)

        pg.setConfigOptions(antialias=True)
        self.trend_plot = pg.PlotWidget()
        self.trend_plot.setMinimumHeight(160)
        self.trend_plot.setBackground(None)
        self.trend_plot.showGrid(x=True, y=True, alpha=0.2)
        self.trend_plot.setTitle("Engagement (minutes into session)")
        self.trend_plot.setYRange(0, 100)
        self.trend_curve = self.trend_plot.plot([], [], symbol="o")

        bottom.addWidget(self.log_list, 3)
        bottom.addWidget(self.trend_plot, 2)

        # --- Page layout
        root = QVBoxLayout(self)
        root.setContentsMargins(22, 20, 22, 20)
        root.setSpacing(12)

        root.addLayout(header)
        root.addWidget(self.reminder_lbl)
        root.addWidget(modes_card)
        root.addWidget(actions_card)
        root.addWidget(eng_card)
        root.addWidget(note_card)
        root.addLayout(bottom, 1)

        # --- Session wiring
        self.session.started.connect(self._on_started)
        self.session.stopped.connect(self._on_stopped)
        self.session.log_appended.connect(self._on_log)
        self.session.modes_changed.connect(self._refresh_modes)
        self.session.actions_changed.connect(self._refresh_actions)
        self.session.engagement_changed.connect(self._on_engagement_changed)
        self.session.reminder_changed.connect(self._on_reminder_changed)

        self._refresh_modes()
        self._refresh_actions()
        self._set_engagement_label(self.session.engagement.value)
        self._set_controls_enabled(False)

    # -----------------------
    # Session control
    # -----------------------

    def toggle_session(self):
        if self.session.active:
            self.session.stop()
        else:
            self.session.start(self.subject_box.currentText())

    def refresh_clock(self):
        self.duration_lbl.setText(format_time(self.session.duration_s()) if self.session.active else "00:00:00")

    def _on_started(self):
        self._close_csv()
        try:
            self._csv = SessionLogger()
        except OSError as e:
            logger.warning("CSV trail disabled: %r", e)
            self._csv = None

        self.log_list.clear()
        for entry in self.session.log.entries()[::-1]:
            self._on_log(entry)

        self._trend_x, self._trend_y = [], []
        self.trend_curve.setData([], [])

        self.note_edit.clear()
        self.eng_slider.blockSignals(True)
        self.eng_slider.setValue(self.session.engagement.value)
        self.eng_slider.blockSignals(False)

        self.start_btn.setText("End observation")
        self.start_btn.setStyleSheet(BUTTON_DANGER)
        self.subject_box.setEnabled(False)
        self._set_controls_enabled(True)
        self.refresh_clock()

    def _on_stopped(self):
        self._close_csv()
        if self._closing:
            return
        self.start_btn.setText("Start observation")
        self.start_btn.setStyleSheet(BUTTON_GO)
        self.subject_box.setEnabled(True)
        self._set_controls_enabled(False)
        self.refresh_clock()
        self.on_end(self.session.snapshot())

    def _set_controls_enabled(self, enabled: bool):
        for b in list(self.mode_btns.values()) + list(self.action_btns.values()):
            b.setEnabled(enabled)
        self.eng_slider.setEnabled(enabled)
        self.add_note_btn.setEnabled(enabled)

    # -----------------------
    # View refresh
    # -----------------------

    def _refresh_modes(self):
        for mode in self.session.modes:
            b = self.mode_btns[mode.id]
            b.setChecked(mode.active)
            b.setObjectName("modeOn" if mode.active else "")
            b.style().unpolish(b)
            b.style().polish(b)
            b.setText(f"{mode.name}   {format_time(mode.elapsed_seconds)}")

    def _refresh_actions(self):
        for action in self.session.actions:
            self.action_btns[action.id].setText(f"{action.name} ({action.count})")

    def _on_log(self, entry):
        stamp = datetime.fromtimestamp(entry.timestamp).strftime("%H:%M:%S")
        self.log_list.insertItem(0, f"[{stamp}] {entry.message}")
        while self.log_list.count() > self.session.log.capacity:
            self.log_list.takeItem(self.log_list.count() - 1)

        if self._csv is not None:
            try:
                self._csv.log(entry)
            except (OSError, ValueError) as e:
                logger.warning("CSV trail write failed, disabling it: %r", e)
                self._close_csv()

    def _set_engagement_label(self, value: int):
        self.eng_lbl.setText(f"{value}  {level_for(value).label}")
        self.eng_lbl.setStyleSheet(f"font-weight: 800; color: {level_color(value)};")

    def _on_engagement_input(self, value: int):
        self.session.set_engagement(int(value))

    def _on_slider_pressed(self):
        self._pressed_at = self.eng_slider.sliderPosition()

    def _on_slider_released(self):
        # Released where it was grabbed: valueChanged will not fire, so confirm the score
        if self._pressed_at is not None and self.eng_slider.sliderPosition() == self._pressed_at:
            self.session.confirm_engagement()
        self._pressed_at = None

    def _on_engagement_changed(self, value: int, level: str):
        self._set_engagement_label(value)
        if self.session.active and self.session.engagement.last_update_time is not None:
            self._trend_x.append(self.session.duration_s() / 60.0)
            self._trend_y.append(value)
            self.trend_curve.setData(self._trend_x, self._trend_y)

    def _on_reminder_changed(self, due: bool):
        self.reminder_lbl.setVisible(due)
        if due and getattr(self.session.settings, "notify_on_reminder", True):
            notify("Chronos AI", "Time to record student engagement.")

    # -----------------------
    # Notes
    # -----------------------

    def submit_note(self):
        if self.session.submit_note(self.note_edit.text()):
            self.note_edit.clear()

    def polish_note(self):
        text = self.note_edit.text().strip()
        if not text or self._polish_worker is not None:
            return
        if not self.client.credentials.has_credential() and not self.ask_for_key():
            return

        self.polish_btn.setEnabled(False)
        self.polish_btn.setText("Polishing…")

        self._polish_worker = ReportWorker(self.client, "polish", text)
        self._polish_worker.result.connect(self._on_polished)
        self._polish_worker.error.connect(self._on_polish_error)
        self._polish_worker.finished.connect(self._on_polish_finished)
        self._polish_worker.start()

    def _on_polished(self, text: str):
        self.note_edit.setText(text.strip())

    def _on_polish_error(self, kind: str, message: str):
        logger.error("Polishing note failed: %s", message)
        if kind == "missing_key":
            self.ask_for_key()
            return
        QMessageBox.warning(self, "Chronos AI", "AI polishing failed. Please try again later.")

    def _on_polish_finished(self):
        self.polish_btn.setEnabled(True)
        self.polish_btn.setText("Polish with AI")
        if self._polish_worker is not None:
            self._polish_worker.deleteLater()
        self._polish_worker = None

    # -----------------------
    # Teardown
    # -----------------------

    def _close_csv(self):
        if self._csv is not None:
            self._csv.close()
            self._csv = None

    def shutdown(self):
        self._closing = True
        if self._polish_worker is not None and self._polish_worker.isRunning():
            self._polish_worker.cancel()
            self._polish_worker.wait(500)
        self.session.close()
        self._close_csv()

    def closeEvent(self, event):
        try:
            self.shutdown()
        finally:
            super().closeEvent(event)
