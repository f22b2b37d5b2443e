# chronos/core/session.py
from __future__ import annotations

import time
from typing import Callable, Iterable, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from chronos.core.actions import ActionCounterSet
from chronos.core.catalog import TEACHING_ACTIONS, TEACHING_MODES
from chronos.core.clock import Clock
from chronos.core.engagement import EngagementTracker
from chronos.core.modes import ModeTimerSet
from chronos.core.session_log import LogEntry, LogKind, SessionLog
from chronos.core.settings_store import AppSettings
from chronos.core.snapshot import SessionSnapshot


class Session(QObject):
    """
    One observation period, start to stop.

    Owns two tickers for the lifetime of an active session:
      - mode ticker (1 Hz) advancing active teaching-mode timers
      - reminder poll (every `reminder_poll_s`) re-evaluating the engagement reminder
    Both handlers re-check `active` when they fire, so a tick queued before
    stop() changes nothing.

    Every mutating call made while the session is inactive is a silent no-op.
    """
    started = Signal()
    stopped = Signal()
    log_appended = Signal(object)        # LogEntry
    modes_changed = Signal()
    actions_changed = Signal()
    engagement_changed = Signal(int, str)  # value, level
    reminder_changed = Signal(bool)

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        modes: Iterable[Tuple[str, str]] = TEACHING_MODES,
        actions: Iterable[Tuple[str, str]] = TEACHING_ACTIONS,
        now: Callable[[], float] = time.time,
        parent=None,
    ):
        super().__init__(parent)
        self.settings = settings or AppSettings()
        self._now = now

        self.active = False
        self._started_at: Optional[float] = None
        self.end_time: Optional[float] = None
        self.subject = ""

        self.modes = ModeTimerSet(modes)
        self.actions = ActionCounterSet(actions)
        self.engagement = EngagementTracker(threshold_s=self.settings.reminder_threshold_s)
        self.log = SessionLog(capacity=self.settings.log_capacity)

        self.mode_ticker = Clock(1000, self)
        self.mode_ticker.tick.connect(self.on_mode_tick)

        self.reminder_poll = Clock(int(self.settings.reminder_poll_s * 1000), self)
        self.reminder_poll.tick.connect(self.on_reminder_poll)

    # -----------------------
    # Lifecycle
    # -----------------------

    def start(self, subject: str) -> bool:
        if self.active:
            return False

        self.modes.reset()
        self.actions.reset()
        self.engagement.reset()
        self.log.reset()

        now = self._now()
        self.subject = subject
        self.active = True
        self._started_at = now
        self.end_time = None

        self._log(f"Observation started - Subject: {subject}", LogKind.SESSION)

        self.mode_ticker.start()
        self.reminder_poll.start()

        self.modes_changed.emit()
        self.actions_changed.emit()
        self.engagement_changed.emit(self.engagement.value, self.engagement.level.value)
        self.reminder_changed.emit(False)
        self.started.emit()
        return True

    def stop(self) -> bool:
        if not self.active:
            return False

        self.active = False
        self.mode_ticker.stop()
        self.reminder_poll.stop()

        self.end_time = self._now()
        self._clear_reminder()
        self._log("Observation ended", LogKind.SESSION)
        self.stopped.emit()
        return True

    def close(self):
        """Release both tickers; safe after stop() or on abnormal teardown."""
        self.mode_ticker.stop()
        self.reminder_poll.stop()
        if self.active:
            self.stop()

    def apply_settings(self, settings: AppSettings) -> bool:
        """Swap in new tunables between observations. Refused while active."""
        if self.active:
            return False
        self.settings = settings
        self.engagement.threshold_s = float(settings.reminder_threshold_s)
        self.reminder_poll.set_interval(int(settings.reminder_poll_s * 1000))
        if settings.log_capacity != self.log.capacity:
            self.log = SessionLog(capacity=settings.log_capacity)
        return True

    @property
    def start_time(self) -> Optional[float]:
        return self._started_at if self.active else None

    def duration_s(self) -> int:
        if self._started_at is None:
            return 0
        end = self._now() if self.active else (self.end_time or self._started_at)
        return max(0, int(end - self._started_at))

    # -----------------------
    # Observer actions
    # -----------------------

    def toggle_mode(self, mode_id: str) -> Optional[bool]:
        if not self.active:
            return None
        on = self.modes.toggle(mode_id)
        name = self.modes.get(mode_id).name
        self._log(f"{name} {'on' if on else 'off'}", LogKind.MODE)
        self.modes_changed.emit()
        return on

    def record_action(self, action_id: str) -> Optional[int]:
        if not self.active:
            return None
        count = self.actions.increment(action_id)
        self._log(f"Recorded: {self.actions.get(action_id).name}", LogKind.ACTION)
        self.actions_changed.emit()
        return count

    def set_engagement(self, value: int):
        if not self.active:
            return None
        was_due = self.engagement.reminder_due
        level = self.engagement.set_value(value, self._now())
        self._log(f"Student engagement: {level.label}", LogKind.ENGAGEMENT)
        self.engagement_changed.emit(self.engagement.value, level.value)
        if was_due:
            self.reminder_changed.emit(False)
        return level

    def confirm_engagement(self):
        """Re-record the current score, e.g. the observer confirms it unchanged."""
        return self.set_engagement(self.engagement.value)

    def submit_note(self, text: str) -> bool:
        if not self.active or not (text or "").strip():
            return False
        self._log(f"Note: {text}", LogKind.NOTE)
        return True

    # -----------------------
    # Tick handlers
    # -----------------------

    def on_mode_tick(self):
        if not self.active:
            return
        self.modes.tick()
        self.modes_changed.emit()

    def on_reminder_poll(self):
        if not self.active:
            self._clear_reminder()
            return
        was_due = self.engagement.reminder_due
        due = self.engagement.evaluate_reminder(self._now(), self.start_time)
        if due != was_due:
            self.reminder_changed.emit(due)

    # -----------------------
    # Snapshot
    # -----------------------

    def snapshot(self) -> SessionSnapshot:
        if self._started_at is None:
            raise RuntimeError("No session has been started")
        end = self._now() if self.active else (self.end_time or self._now())
        return SessionSnapshot(
            subject=self.subject,
            session_start=self._started_at,
            session_end=end,
            modes=self.modes.totals(),
            actions=self.actions.totals(),
            logs=tuple(self.log.chronological()),
        )

    # -----------------------
    # Internals
    # -----------------------

    def _log(self, message: str, kind: LogKind) -> LogEntry:
        entry = self.log.append(message, kind, self._now())
        self.log_appended.emit(entry)
        return entry

    def _clear_reminder(self):
        if not self.engagement.reminder_due:
            return
        self.engagement.clear_reminder()
        self.reminder_changed.emit(False)
