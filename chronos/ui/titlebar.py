from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QPushButton
from PySide6.QtCore import Qt, QPoint


class TitleBar(QWidget):
    """
    Frameless window title bar:
    - Drag anywhere on the bar to move the window
    - Current time (driven by the main window's clock)
    - Settings, minimize, maximize/restore, close
    """
    def __init__(self, window, title: str = "Chronos AI", on_settings=None):
        super().__init__()
        self._window = window
        self._drag_pos: QPoint | None = None

        self.setFixedHeight(44)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 8, 12, 8)
        layout.setSpacing(10)

        self.title = QLabel(title)
        self.title.setStyleSheet("font-size: 14px; font-weight: 750;")

        self.clock_lbl = QLabel("--:--:--")
        self.clock_lbl.setObjectName("muted")
        self.clock_lbl.setStyleSheet("font-size: 13px; font-weight: 650;")

        self.settings_btn = self._btn("⚙")
        self.min_btn = self._btn("—")
        self.max_btn = self._btn("⬜")
        self.close_btn = self._btn("✕", danger=True)

        if callable(on_settings):
            self.settings_btn.clicked.connect(on_settings)
        else:
            self.settings_btn.hide()
        self.min_btn.clicked.connect(self._window.showMinimized)
        self.max_btn.clicked.connect(self._toggle_max_restore)
        self.close_btn.clicked.connect(self._window.close)

        layout.addWidget(self.title)
        layout.addStretch(1)
        layout.addWidget(self.clock_lbl)
        layout.addSpacing(8)
        layout.addWidget(self.settings_btn)
        layout.addWidget(self.min_btn)
        layout.addWidget(self.max_btn)
        layout.addWidget(self.close_btn)

        self.setStyleSheet("""
            QWidget {
                background: rgba(255,255,255,0.03);
                border-bottom: 1px solid rgba(255,255,255,0.06);
                border-top-left-radius: 16px;
                border-top-right-radius: 16px;
            }
        """)

    def set_clock_text(self, text: str):
        self.clock_lbl.setText(text)

    def set_settings_enabled(self, enabled: bool):
        self.settings_btn.setEnabled(enabled)

    def _btn(self, text: str, danger: bool = False) -> QPushButton:
        b = QPushButton(text)
        b.setFixedSize(36, 30)
        b.setCursor(Qt.PointingHandCursor)
        hover = "rgba(239,68,68,0.25)" if danger else "rgba(255,255,255,0.10)"
        pressed = "rgba(239,68,68,0.35)" if danger else "rgba(255,255,255,0.14)"
        b.setStyleSheet(f"""
            QPushButton {{
                background: rgba(255,255,255,0.06);
                border: 1px solid rgba(255,255,255,0.10);
                border-radius: 10px;
                font-weight: 900;
            }}
            QPushButton:hover {{ background: {hover}; }}
            QPushButton:pressed {{ background: {pressed}; }}
        """)
        return b

    def _toggle_max_restore(self):
        if self._window.isMaximized():
            self._window.showNormal()
        else:
            self._window.showMaximized()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_pos = event.globalPosition().toPoint() - self._window.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event):
        if self._window.isMaximized():
            return

        if self._drag_pos is not None and event.buttons() & Qt.LeftButton:
            self._window.move(event.globalPosition().toPoint() - self._drag_pos)
            event.accept()

    def mouseReleaseEvent(self, event):
        self._drag_pos = None
        event.accept()
