"""Tests for the observation session lifecycle."""

import pytest
from PySide6.QtCore import QCoreApplication, QEvent

from chronos.core.session import Session
from chronos.core.session_log import LogKind
from chronos.core.settings_store import AppSettings


@pytest.fixture
def session(qapp, fake_clock):
    s = Session(AppSettings(reminder_threshold_s=300, reminder_poll_s=10), now=fake_clock)
    yield s
    s.close()
    s.deleteLater()
    QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)


def messages(session):
    return [e.message for e in session.log.chronological()]


class TestInactiveSession:
    """Everything is a silent no-op before start()."""

    def test_operations_do_nothing(self, session):
        assert session.toggle_mode("lecture") is None
        assert session.record_action("praise") is None
        assert session.set_engagement(90) is None
        assert session.submit_note("hello") is False
        session.on_mode_tick()

        assert len(session.log) == 0
        assert session.modes.get("lecture").elapsed_seconds == 0
        assert session.actions.get("praise").count == 0
        assert session.engagement.value == 50

    def test_stop_without_start(self, session):
        assert session.stop() is False
        assert session.end_time is None

    def test_snapshot_requires_a_session(self, session):
        with pytest.raises(RuntimeError):
            session.snapshot()


class TestLifecycle:
    def test_start_logs_and_runs_tickers(self, session, fake_clock):
        started = []
        session.started.connect(lambda: started.append(True))

        assert session.start("Physics") is True
        assert session.active
        assert session.start_time == fake_clock.now
        assert session.mode_ticker.is_running
        assert session.reminder_poll.is_running
        assert session.reminder_poll.interval_ms == 10_000
        assert messages(session) == ["Observation started - Subject: Physics"]
        assert started == [True]

    def test_second_start_is_ignored(self, session):
        session.start("Physics")
        session.toggle_mode("lecture")
        assert session.start("History") is False
        assert session.subject == "Physics"
        assert session.modes.get("lecture").active

    def test_stop_ends_session(self, session, fake_clock):
        stopped = []
        session.stopped.connect(lambda: stopped.append(True))
        session.start("Physics")
        fake_clock.advance(42)

        assert session.stop() is True
        assert not session.active
        assert session.start_time is None
        assert session.end_time == fake_clock.now
        assert not session.mode_ticker.is_running
        assert not session.reminder_poll.is_running
        assert messages(session)[-1] == "Observation ended"
        assert session.duration_s() == 42
        assert stopped == [True]

    def test_restart_resets_state(self, session):
        session.start("Physics")
        session.toggle_mode("lecture")
        session.on_mode_tick()
        session.record_action("praise")
        session.set_engagement(90)
        session.stop()

        session.start("Biology")
        assert session.modes.get("lecture").elapsed_seconds == 0
        assert not session.modes.get("lecture").active
        assert session.actions.get("praise").count == 0
        assert session.engagement.value == 50
        assert messages(session) == ["Observation started - Subject: Biology"]

    def test_close_stops_an_active_session(self, session):
        session.start("Physics")
        session.close()
        assert not session.active
        assert not session.mode_ticker.is_running


class TestObserverActions:
    def test_mode_toggle_logs(self, session):
        session.start("Physics")
        assert session.toggle_mode("lecture") is True
        assert session.toggle_mode("lecture") is False
        entries = session.log.chronological()[1:]
        assert [e.message for e in entries] == ["Lecture on", "Lecture off"]
        assert all(e.kind is LogKind.MODE for e in entries)

    def test_mode_tick_advances_active_modes(self, session):
        session.start("Physics")
        session.toggle_mode("lecture")
        session.toggle_mode("practice")
        for _ in range(3):
            session.on_mode_tick()
        assert session.modes.get("lecture").elapsed_seconds == 3
        assert session.modes.get("practice").elapsed_seconds == 3
        assert session.modes.get("digital-tool").elapsed_seconds == 0

    def test_tick_after_stop_is_ignored(self, session):
        session.start("Physics")
        session.toggle_mode("lecture")
        session.on_mode_tick()
        session.stop()
        session.on_mode_tick()
        assert session.modes.get("lecture").elapsed_seconds == 1

    def test_record_action(self, session):
        session.start("Physics")
        assert session.record_action("praise") == 1
        assert session.record_action("praise") == 2
        assert messages(session)[-1] == "Recorded: Positive praise"

    def test_set_engagement(self, session):
        changes = []
        session.engagement_changed.connect(lambda v, lvl: changes.append((v, lvl)))
        session.start("Physics")
        session.set_engagement(20)
        assert changes[-1] == (20, "low")
        assert messages(session)[-1] == "Student engagement: Low"

    def test_notes(self, session):
        session.start("Physics")
        assert session.submit_note("   ") is False
        assert session.submit_note("Quiet start") is True
        entry = session.log.entries()[0]
        assert entry.message == "Note: Quiet start"
        assert entry.kind is LogKind.NOTE


class TestReminder:
    def test_poll_raises_reminder_after_threshold(self, session, fake_clock):
        seen = []
        session.reminder_changed.connect(lambda due: seen.append(bool(due)))
        session.start("Physics")
        seen.clear()

        fake_clock.advance(299)
        session.on_reminder_poll()
        assert seen == []

        fake_clock.advance(2)
        session.on_reminder_poll()
        assert seen == [True]

        # Unchanged state emits nothing
        session.on_reminder_poll()
        assert seen == [True]

    def test_score_update_clears_reminder(self, session, fake_clock):
        seen = []
        session.reminder_changed.connect(lambda due: seen.append(bool(due)))
        session.start("Physics")
        fake_clock.advance(400)
        session.on_reminder_poll()
        seen.clear()

        session.set_engagement(70)
        assert session.engagement.reminder_due is False
        assert seen == [False]

    def test_stop_clears_reminder(self, session, fake_clock):
        session.start("Physics")
        fake_clock.advance(400)
        session.on_reminder_poll()
        session.stop()
        assert session.engagement.reminder_due is False


class TestSnapshot:
    def test_snapshot_after_stop(self, session, fake_clock):
        start = fake_clock.now
        session.start("Chemistry")
        session.toggle_mode("lecture")
        session.on_mode_tick()
        session.on_mode_tick()
        session.record_action("open-question")
        fake_clock.advance(60)
        session.stop()

        snap = session.snapshot()
        assert snap.subject == "Chemistry"
        assert snap.session_start == start
        assert snap.session_end == start + 60
        assert dict((m.name, m.total_seconds) for m in snap.modes)["Lecture"] == 2
        assert dict((a.name, a.count) for a in snap.actions)["Open question"] == 1
        assert snap.logs[0].message.startswith("Observation started")
        assert snap.logs[-1].message == "Observation ended"

    def test_snapshot_while_active_uses_now(self, session, fake_clock):
        session.start("Chemistry")
        fake_clock.advance(10)
        assert session.snapshot().session_end == fake_clock.now


class TestApplySettings:
    def test_refused_while_active(self, session):
        session.start("Physics")
        assert session.apply_settings(AppSettings(reminder_threshold_s=60)) is False
        assert session.engagement.threshold_s == 300

    def test_applied_between_sessions(self, session):
        ok = session.apply_settings(AppSettings(reminder_threshold_s=60, reminder_poll_s=5, log_capacity=20))
        assert ok is True
        assert session.engagement.threshold_s == 60
        assert session.reminder_poll.interval_ms == 5000
        assert session.log.capacity == 20


class TestConfirmEngagement:
    """Re-recording an unchanged score."""

    def test_confirm_clears_reminder_and_logs(self, session, fake_clock):
        seen = []
        session.reminder_changed.connect(lambda due: seen.append(bool(due)))
        session.start("Physics")
        session.set_engagement(80)
        fake_clock.advance(400)
        session.on_reminder_poll()
        assert session.engagement.reminder_due
        seen.clear()

        session.confirm_engagement()
        assert session.engagement.value == 80
        assert session.engagement.reminder_due is False
        assert session.engagement.last_update_time == fake_clock.now
        assert seen == [False]
        assert messages(session)[-1] == "Student engagement: High"

    def test_confirm_restarts_reminder_window(self, session, fake_clock):
        session.start("Physics")
        fake_clock.advance(250)
        session.confirm_engagement()
        fake_clock.advance(250)
        session.on_reminder_poll()
        assert session.engagement.reminder_due is False

    def test_confirm_while_inactive_is_ignored(self, session):
        assert session.confirm_engagement() is None
        assert len(session.log) == 0
