# chronos/ui/settings.py

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QHBoxLayout, QPushButton, QLineEdit,
    QFormLayout, QDoubleSpinBox, QSpinBox, QCheckBox,
)
from PySide6.QtCore import Qt

from chronos.core.credentials import CredentialStore
from chronos.core.settings_store import SettingsStore, AppSettings
from chronos.ui.style import BUTTON_DANGER, card


class SettingsScreen(QWidget):
    def __init__(self, credentials: CredentialStore, on_back, store: SettingsStore | None = None):
        super().__init__()
        self.on_back = on_back
        self.credentials = credentials
        self.store = store or SettingsStore()
        self.settings = self.store.load()

        root = QVBoxLayout(self)
        root.setContentsMargins(22, 20, 22, 20)
        root.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("Settings")
        title.setStyleSheet("font-size: 24px; font-weight: 800;")
        header.addWidget(title, 1)

        back = QPushButton("Back")
        back.setCursor(Qt.PointingHandCursor)
        back.clicked.connect(self.on_back)
        header.addWidget(back, 0, Qt.AlignRight)
        root.addLayout(header)

        subtitle = QLabel(
            "Reminder and AI settings apply from the next observation you start."
        )
        subtitle.setObjectName("muted")
        root.addWidget(subtitle)

        # ---- API key
        key_card = card()
        root.addWidget(key_card)

        key_wrap = QVBoxLayout(key_card)
        key_wrap.setContentsMargins(16, 14, 16, 14)
        key_wrap.setSpacing(10)

        key_title = QLabel("Gemini API key")
        key_title.setStyleSheet("font-size: 16px; font-weight: 850;")
        key_wrap.addWidget(key_title)

        self.key_status = QLabel()
        self.key_status.setWordWrap(True)
        self.key_status.setStyleSheet("color: rgba(231,238,247,0.72); font-size: 12px;")
        key_wrap.addWidget(self.key_status)

        key_row = QHBoxLayout()
        self.key_edit = QLineEdit()
        self.key_edit.setEchoMode(QLineEdit.Password)
        self.key_edit.setPlaceholderText("Paste a new API key")

        save_key = QPushButton("Save key")
        save_key.setCursor(Qt.PointingHandCursor)
        save_key.clicked.connect(self._save_key)

        clear_key = QPushButton("Forget key")
        clear_key.setCursor(Qt.PointingHandCursor)
        clear_key.clicked.connect(self._clear_key)
        clear_key.setStyleSheet(BUTTON_DANGER)

        key_row.addWidget(self.key_edit, 1)
        key_row.addWidget(save_key)
        key_row.addWidget(clear_key)
        key_wrap.addLayout(key_row)

        # ---- Tunables
        c = card()
        root.addWidget(c)

        wrap = QVBoxLayout(c)
        wrap.setContentsMargins(16, 14, 16, 14)

        form = QFormLayout()
        form.setHorizontalSpacing(18)
        form.setVerticalSpacing(12)
        wrap.addLayout(form)

        self.reminder_threshold_s = QSpinBox(); self.reminder_threshold_s.setRange(30, 3600); self.reminder_threshold_s.setSingleStep(30)
        self.reminder_poll_s = QSpinBox(); self.reminder_poll_s.setRange(1, 120)
        self.notify_on_reminder = QCheckBox("Desktop notification when the reminder fires")
        self.max_attempts = QSpinBox(); self.max_attempts.setRange(1, 6)
        self.request_timeout_s = QDoubleSpinBox(); self.request_timeout_s.setRange(5.0, 300.0); self.request_timeout_s.setSingleStep(5.0); self.request_timeout_s.setDecimals(0)
        self.model = QLineEdit()

        form.addRow("Engagement reminder after (sec)", self.reminder_threshold_s)
        form.addRow("Reminder check interval (sec)", self.reminder_poll_s)
        form.addRow("", self.notify_on_reminder)
        form.addRow("AI attempts per request", self.max_attempts)
        form.addRow("AI request timeout (sec)", self.request_timeout_s)
        form.addRow("Gemini model", self.model)

        btns = QHBoxLayout()
        btns.addStretch(1)

        reset = QPushButton("Reset defaults")
        reset.setCursor(Qt.PointingHandCursor)
        reset.clicked.connect(self._reset)

        save = QPushButton("Save")
        save.setCursor(Qt.PointingHandCursor)
        save.clicked.connect(self._save)

        btns.addWidget(reset)
        btns.addWidget(save)
        wrap.addSpacing(10)
        wrap.addLayout(btns)

        root.addStretch(1)

        self._load_into_ui(self.settings)
        self._refresh_key_status()

    def showEvent(self, event):
        super().showEvent(event)
        self._refresh_key_status()

    # -----------------------
    # API key
    # -----------------------

    def _refresh_key_status(self):
        if self.credentials.has_credential():
            self.key_status.setText("A key is available. Saved keys expire 2 hours after they are entered.")
        else:
            self.key_status.setText("No key set. AI polishing and reports are unavailable.")

    def _save_key(self):
        key = self.key_edit.text().strip()
        if not key:
            return
        self.credentials.set(key)
        self.key_edit.clear()
        self._refresh_key_status()

    def _clear_key(self):
        self.credentials.clear()
        self._refresh_key_status()

    # -----------------------
    # Tunables
    # -----------------------

    def _load_into_ui(self, s: AppSettings):
        self.reminder_threshold_s.setValue(int(s.reminder_threshold_s))
        self.reminder_poll_s.setValue(int(s.reminder_poll_s))
        self.notify_on_reminder.setChecked(bool(s.notify_on_reminder))
        self.max_attempts.setValue(int(s.max_attempts))
        self.request_timeout_s.setValue(float(s.request_timeout_s))
        self.model.setText(str(s.model))

    def _read_from_ui(self) -> AppSettings:
        return AppSettings(
            reminder_threshold_s=int(self.reminder_threshold_s.value()),
            reminder_poll_s=int(self.reminder_poll_s.value()),
            log_capacity=int(self.settings.log_capacity),
            max_attempts=int(self.max_attempts.value()),
            model=self.model.text().strip() or AppSettings.model,
            request_timeout_s=float(self.request_timeout_s.value()),
            credential_ttl_s=int(self.settings.credential_ttl_s),
            notify_on_reminder=bool(self.notify_on_reminder.isChecked()),
        )

    def get_settings(self) -> AppSettings:
        return self.settings

    def _save(self):
        self.settings = self._read_from_ui()
        self.store.save(self.settings)
        self.on_back()

    def _reset(self):
        self.settings = AppSettings()
        self._load_into_ui(self.settings)
        self.store.save(self.settings)
