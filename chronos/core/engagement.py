from __future__ import annotations

from enum import Enum
from typing import Optional


class EngagementLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def label(self) -> str:
        return self.value.capitalize()


DEFAULT_VALUE = 50


def level_for(value: int) -> EngagementLevel:
    if value > 66:
        return EngagementLevel.HIGH
    if value > 33:
        return EngagementLevel.MEDIUM
    return EngagementLevel.LOW


def level_color(value: int) -> str:
    level = level_for(value)
    if level is EngagementLevel.HIGH:
        return "#22c55e"   # green
    if level is EngagementLevel.MEDIUM:
        return "#facc15"   # yellow
    return "#ef4444"       # red


class EngagementTracker:
    """
    Observer-entered engagement score with an idle reminder.

    The reminder is due when neither a score update nor the session start
    happened within `threshold_s`. evaluate_reminder() only recomputes the
    flag; callers decide when to poll.
    """

    def __init__(self, threshold_s: float = 300.0):
        self.threshold_s = float(threshold_s)
        self.value = DEFAULT_VALUE
        self.level = level_for(DEFAULT_VALUE)
        self.last_update_time: Optional[float] = None
        self.reminder_due = False

    def set_value(self, value: int, now: float) -> EngagementLevel:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Engagement value must be an integer, got {value!r}")
        if not 0 <= value <= 100:
            raise ValueError(f"Engagement value out of range [0, 100]: {value}")

        self.value = value
        self.level = level_for(value)
        self.last_update_time = float(now)
        self.reminder_due = False
        return self.level

    def evaluate_reminder(self, now: float, session_start: Optional[float]) -> bool:
        reference = self.last_update_time
        if reference is None:
            reference = session_start if session_start is not None else now
        self.reminder_due = (now - reference) > self.threshold_s
        return self.reminder_due

    def clear_reminder(self):
        self.reminder_due = False

    def reset(self):
        self.value = DEFAULT_VALUE
        self.level = level_for(DEFAULT_VALUE)
        self.last_update_time = None
        self.reminder_due = False
