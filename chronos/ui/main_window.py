# chronos/ui/main_window.py
import logging
import sys
import time

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QStackedWidget,
    QWidget,
    QVBoxLayout,
    QGraphicsDropShadowEffect,
    QDialog,
)
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainterPath, QRegion, QGuiApplication

from chronos.core.clock import Clock
from chronos.core.credentials import CredentialStore
from chronos.core.report_client import ReportClient
from chronos.core.session import Session
from chronos.core.settings_store import SettingsStore
from chronos.core.snapshot import SessionSnapshot
from chronos.ui.api_key_dialog import ApiKeyDialog
from chronos.ui.style import APP_QSS
from chronos.ui.titlebar import TitleBar
from chronos.ui.session import SessionScreen
from chronos.ui.settings import SettingsScreen
from chronos.ui.summary import SummaryScreen

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()

        self.setWindowTitle("Chronos AI")
        self.resize(1080, 760)

        self.setWindowFlag(Qt.FramelessWindowHint, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)

        self._radius = 18
        self._shadow_margin = 22

        outer = QWidget()
        outer.setAttribute(Qt.WA_TranslucentBackground, True)

        outer_layout = QVBoxLayout(outer)
        outer_layout.setContentsMargins(*(self._shadow_margin,) * 4)
        outer_layout.setSpacing(0)

        self.container = QWidget()
        self.container.setObjectName("appContainer")
        self.container.setStyleSheet(f"""
            QWidget#appContainer {{
                background: rgba(11, 15, 20, 0.96);
                border-radius: {self._radius}px;
            }}
        """)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(42)
        shadow.setOffset(0, 10)
        shadow.setColor(Qt.black)
        self.container.setGraphicsEffect(shadow)

        container_layout = QVBoxLayout(self.container)
        container_layout.setContentsMargins(12, 12, 12, 12)
        container_layout.setSpacing(10)

        self.stack = QStackedWidget()
        self.stack.setStyleSheet("""
            QStackedWidget {
                background: rgba(255,255,255,0.02);
                border: 1px solid rgba(255,255,255,0.06);
                border-radius: 14px;
            }
        """)

        # Core objects
        self.settings_store = SettingsStore()
        app_settings = self.settings_store.load()
        self.credentials = CredentialStore(ttl_s=app_settings.credential_ttl_s)
        self.client = ReportClient(self.credentials, app_settings)
        self.session = Session(app_settings, parent=self)

        self.titlebar = TitleBar(self, "Chronos AI", on_settings=self.go_settings)

        container_layout.addWidget(self.titlebar)
        container_layout.addWidget(self.stack)
        outer_layout.addWidget(self.container)
        self.setCentralWidget(outer)

        # Screens
        self.session_screen = SessionScreen(
            session=self.session,
            client=self.client,
            ask_for_key=self.ask_for_key,
            on_end=self.go_summary,
        )
        self.settings_screen = SettingsScreen(
            credentials=self.credentials,
            on_back=self.go_back_from_settings,
            store=self.settings_store,
        )
        self.summary = SummaryScreen(
            client=self.client,
            ask_for_key=self.ask_for_key,
            on_done=self.go_session,
        )

        for w in (self.session_screen, self.settings_screen, self.summary):
            self.stack.addWidget(w)
        self.stack.setCurrentWidget(self.session_screen)

        # Settings are locked while an observation runs
        self.session.started.connect(lambda: self.titlebar.set_settings_enabled(False))
        self.session.stopped.connect(lambda: self.titlebar.set_settings_enabled(True))

        # Wall clock + live duration, independent of the session's own tickers
        self.display_clock = Clock(1000, self)
        self.display_clock.tick.connect(self._on_display_tick)
        self.display_clock.start()
        self._on_display_tick()

        self._place_safely()

    # -----------------------
    # Navigation
    # -----------------------

    def go_session(self):
        self.stack.setCurrentWidget(self.session_screen)

    def go_settings(self):
        if self.session.active:
            return
        self.stack.setCurrentWidget(self.settings_screen)

    def go_back_from_settings(self):
        s = self.settings_screen.get_settings()
        self.session.apply_settings(s)
        self.client.apply_settings(s)
        self.credentials.ttl_s = float(s.credential_ttl_s)
        self.go_session()

    def go_summary(self, snapshot: SessionSnapshot):
        self.summary.set_snapshot(snapshot)
        self.stack.setCurrentWidget(self.summary)

    # -----------------------
    # API key prompt
    # -----------------------

    def ask_for_key(self, detail: str | None = None) -> bool:
        dlg = ApiKeyDialog(self, detail=detail)
        if dlg.exec() != QDialog.Accepted:
            return False
        try:
            self.credentials.set(dlg.key())
        except ValueError:
            return False
        logger.info("API key updated")
        return True

    # -----------------------
    # Clock
    # -----------------------

    def _on_display_tick(self):
        self.titlebar.set_clock_text(time.strftime("%H:%M:%S"))
        self.session_screen.refresh_clock()

    # -----------------------
    # Window chrome
    # -----------------------

    def _place_safely(self):
        screen = QGuiApplication.primaryScreen()
        if not screen:
            return
        geo = screen.availableGeometry()
        w = min(self.width(), geo.width() - 40)
        h = min(self.height(), geo.height() - 40)
        self.resize(w, h)
        self.move(geo.x() + (geo.width() - w) // 2, geo.y() + (geo.height() - h) // 2)

    def _apply_rounded_mask(self):
        w, h = self.width(), self.height()
        m, r = self._shadow_margin, self._radius
        rect = QRectF(m, m, w - 2 * m, h - 2 * m)
        path = QPainterPath()
        path.addRoundedRect(rect, r, r)
        self.setMask(QRegion(path.toFillPolygon().toPolygon()))

    def showEvent(self, event):
        super().showEvent(event)
        self._apply_rounded_mask()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._apply_rounded_mask()

    def closeEvent(self, event):
        self.display_clock.stop()
        self.summary.shutdown()
        self.session_screen.shutdown()
        super().closeEvent(event)


def launch_app():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setStyleSheet(APP_QSS)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
