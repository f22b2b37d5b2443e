"""Pytest fixtures for Chronos tests."""

import pytest
from PySide6.QtCore import QCoreApplication

from chronos.core.actions import ActionTotal
from chronos.core.modes import ModeTotal
from chronos.core.session_log import LogEntry, LogKind
from chronos.core.snapshot import SessionSnapshot


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def qapp():
    """A Qt core application so QObjects and QTimers can be created."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_snapshot() -> SessionSnapshot:
    """A finished 15 minute maths lesson."""
    start = 1_700_000_000.0
    return SessionSnapshot(
        subject="Mathematics",
        session_start=start,
        session_end=start + 900,
        modes=(ModeTotal("Lecture", 600), ModeTotal("Group discussion", 0)),
        actions=(ActionTotal("Positive praise", 3), ActionTotal("Open question", 0)),
        logs=(
            LogEntry(start, "Observation started - Subject: Mathematics", LogKind.SESSION),
            LogEntry(start + 5, "Lecture on", LogKind.MODE),
            LogEntry(start + 605, "Lecture off", LogKind.MODE),
            LogEntry(start + 900, "Observation ended", LogKind.SESSION),
        ),
    )
