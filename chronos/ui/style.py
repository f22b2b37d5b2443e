import sys

from PySide6.QtWidgets import QFrame

if sys.platform == "darwin":
    FONT_STACK = 'Helvetica Neue","Arial'
elif sys.platform.startswith("win"):
    FONT_STACK = 'Segoe UI","Arial'
else:
    FONT_STACK = 'DejaVu Sans","Arial'

APP_QSS = f"""
QMainWindow, QWidget {{
    background: #0b0f14;
    color: #e7eef7;
    font-family: "{FONT_STACK}";
    font-size: 14px;
}}

QLabel {{
    color: #e7eef7;
}}

QLabel#muted {{
    color: rgba(231,238,247,0.70);
}}

QPushButton {{
    background: #1f2937;
    border: 1px solid rgba(255,255,255,0.10);
    padding: 10px 14px;
    border-radius: 12px;
    font-weight: 600;
}}
QPushButton:hover {{ background: #263244; }}
QPushButton:pressed {{ background: #1b2431; }}
QPushButton:disabled {{ color: rgba(231,238,247,0.35); }}

QPushButton#modeOn {{
    background: rgba(34,197,94,0.18);
    border: 1px solid rgba(34,197,94,0.40);
}}

QLineEdit, QPlainTextEdit, QListWidget, QComboBox, QSpinBox, QDoubleSpinBox {{
    background: rgba(255,255,255,0.05);
    border: 1px solid rgba(255,255,255,0.10);
    border-radius: 10px;
    padding: 6px 8px;
}}

QSlider::groove:horizontal {{
    height: 8px;
    border-radius: 4px;
    background: rgba(255,255,255,0.10);
}}
QSlider::handle:horizontal {{
    width: 18px;
    margin: -6px 0;
    border-radius: 9px;
    background: #e7eef7;
}}
"""

BUTTON_DANGER = """
    QPushButton {
        background: rgba(239,68,68,0.12);
        border: 1px solid rgba(239,68,68,0.22);
        border-radius: 14px;
        padding: 10px 14px;
        font-weight: 700;
    }
    QPushButton:hover { background: rgba(239,68,68,0.18); }
    QPushButton:pressed { background: rgba(239,68,68,0.26); }
"""

BUTTON_GO = """
    QPushButton {
        background: rgba(34,197,94,0.14);
        border: 1px solid rgba(34,197,94,0.28);
        border-radius: 14px;
        padding: 10px 14px;
        font-weight: 800;
    }
    QPushButton:hover { background: rgba(34,197,94,0.20); }
    QPushButton:pressed { background: rgba(34,197,94,0.26); }
"""

BUTTON_SOFT = """
    QPushButton {
        background: rgba(255,255,255,0.06);
        border: 1px solid rgba(255,255,255,0.14);
        border-radius: 12px;
        padding: 8px 12px;
        font-weight: 650;
    }
    QPushButton:hover { background: rgba(255,255,255,0.14); }
    QPushButton:pressed { background: rgba(255,255,255,0.20); }
"""


def card() -> QFrame:
    f = QFrame()
    f.setStyleSheet("""
        QFrame {
            background: rgba(255,255,255,0.05);
            border: 1px solid rgba(255,255,255,0.08);
            border-radius: 16px;
        }
    """)
    return f
