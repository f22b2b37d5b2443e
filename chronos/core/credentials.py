# chronos/core/credentials.py
from __future__ import annotations

import json
import logging
import os
import time
from typing import Callable, Optional

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

ORG = "Chronos"
APP = "Chronos"
KEY_API_KEY = "gemini/api_key"
ENV_API_KEY = "GEMINI_API_KEY"


class CredentialStore:
    """
    Gemini API key with an expiry window.

    Stored through QSettings as {"value", "timestamp"}; once `ttl_s` has
    passed since the last set() the stored key is discarded. With nothing
    stored, get() falls back to the GEMINI_API_KEY environment variable.
    """

    def __init__(
        self,
        settings: Optional[QSettings] = None,
        ttl_s: float = 2 * 60 * 60,
        now: Callable[[], float] = time.time,
        env_var: Optional[str] = ENV_API_KEY,
    ):
        self._settings = settings if settings is not None else QSettings(ORG, APP)
        self.ttl_s = float(ttl_s)
        self._now = now
        self._env_var = env_var
        self._cached: Optional[str] = None
        self._load()

    def _load(self):
        raw = self._settings.value(KEY_API_KEY, None)
        if not raw:
            self._cached = None
            return
        try:
            data = json.loads(str(raw))
            value = str(data["value"])
            stamp = float(data["timestamp"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Stored API key is corrupt, clearing it: %r", e)
            self.clear()
            return

        if self._now() - stamp < self.ttl_s:
            self._cached = value
        else:
            logger.info("Stored API key expired, clearing it")
            self.clear()

    def get(self) -> Optional[str]:
        self._load()
        if self._cached:
            return self._cached
        if self._env_var:
            return os.environ.get(self._env_var) or None
        return None

    def has_credential(self) -> bool:
        return self.get() is not None

    def set(self, value: str) -> None:
        value = (value or "").strip()
        if not value:
            raise ValueError("API key must not be empty")
        payload = json.dumps({"value": value, "timestamp": self._now()})
        self._settings.setValue(KEY_API_KEY, payload)
        self._settings.sync()
        self._cached = value

    def clear(self) -> None:
        self._cached = None
        self._settings.remove(KEY_API_KEY)
        self._settings.sync()
