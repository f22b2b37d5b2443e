# chronos/ui/api_key_dialog.py

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QPushButton, QHBoxLayout, QFrame, QLineEdit,
    QGraphicsDropShadowEffect,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor


class ApiKeyDialog(QDialog):
    """
    Blocking modal shown when an AI call has no usable API key.
    Frameless, same card look as the rest of the app.

    exec() returns QDialog.Accepted with key() filled in, or Rejected.
    """

    def __init__(self, parent=None, detail: str | None = None):
        super().__init__(parent)

        self.setModal(True)
        self.setObjectName("apiKeyDialog")
        self.setWindowFlags(Qt.Dialog | Qt.FramelessWindowHint)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setFixedWidth(520)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(10, 10, 10, 10)
        outer.setSpacing(0)

        card = QFrame()
        card.setObjectName("card")
        card.setStyleSheet("""
            QFrame#card {
                background: rgba(11, 15, 20, 0.98);
                border: 1px solid rgba(255,255,255,0.10);
                border-radius: 18px;
            }
        """)
        outer.addWidget(card)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(40)
        shadow.setOffset(0, 18)
        shadow.setColor(QColor(0, 0, 0, 160))
        card.setGraphicsEffect(shadow)

        root = QVBoxLayout(card)
        root.setContentsMargins(22, 20, 22, 18)
        root.setSpacing(12)

        title = QLabel("Gemini API key required")
        title.setStyleSheet("font-size: 18px; font-weight: 950; color: rgba(231,238,247,0.95);")
        root.addWidget(title)

        msg = QLabel(
            "AI features need a Gemini API key. The key is kept on this computer "
            "for 2 hours and then forgotten."
        )
        msg.setWordWrap(True)
        msg.setStyleSheet("color: rgba(231,238,247,0.74); font-size: 13px;")
        root.addWidget(msg)

        if detail:
            d = QLabel(detail)
            d.setWordWrap(True)
            d.setStyleSheet("color: rgba(231,238,247,0.55); font-size: 12px;")
            root.addWidget(d)

        self.key_edit = QLineEdit()
        self.key_edit.setEchoMode(QLineEdit.Password)
        self.key_edit.setPlaceholderText("Paste your API key")
        root.addWidget(self.key_edit)

        btns = QHBoxLayout()
        btns.setSpacing(10)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.setCursor(Qt.PointingHandCursor)
        cancel_btn.clicked.connect(self.reject)

        save_btn = QPushButton("Save key")
        save_btn.setCursor(Qt.PointingHandCursor)
        save_btn.setDefault(True)
        save_btn.clicked.connect(self._accept_if_filled)
        save_btn.setStyleSheet("""
            QPushButton {
                background: rgba(34,197,94,0.08);
                border: 1px solid rgba(34,197,94,0.18);
                border-radius: 12px;
                padding: 12px 14px;
                font-weight: 900;
            }
            QPushButton:hover { background: rgba(34,197,94,0.11); }
            QPushButton:pressed { background: rgba(34,197,94,0.14); }
        """)

        btns.addWidget(cancel_btn, 1)
        btns.addWidget(save_btn, 1)
        root.addLayout(btns)

    def key(self) -> str:
        return self.key_edit.text().strip()

    def _accept_if_filled(self):
        if self.key():
            self.accept()
