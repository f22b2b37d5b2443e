"""Gemini generateContent client with bounded retry and exponential backoff."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from chronos.core.prompts import polish_prompt, report_prompt
from chronos.core.settings_store import AppSettings
from chronos.core.snapshot import SessionSnapshot

logger = logging.getLogger(__name__)

API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"


class ReportError(Exception):
    pass


class MissingCredential(ReportError):
    def __init__(self, message: str = "Gemini API key is not set or has expired"):
        super().__init__(message)


class TransientServerError(ReportError):
    def __init__(self, status: int):
        super().__init__(f"Server error: {status}")
        self.status = status


class ParseFailure(ReportError):
    def __init__(self, payload: Any):
        super().__init__("Could not find generated text in the API response")
        self.payload = payload


class NonRetryableApiError(ReportError):
    def __init__(self, status: int, message: str):
        super().__init__(f"API Error: {message}")
        self.status = status
        self.api_message = message


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    max_output_tokens: int


POLISH_CONFIG = GenerationConfig(temperature=0.5, max_output_tokens=256)
REPORT_CONFIG = GenerationConfig(temperature=0.7, max_output_tokens=2048)


def build_request_body(prompt: str, config: GenerationConfig) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_output_tokens,
        },
    }


def extract_text(payload: Any) -> str:
    """Return candidates[0].content.parts[0].text or raise ParseFailure."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise ParseFailure(payload) from None
    if not isinstance(text, str):
        raise ParseFailure(payload)
    return text


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    message = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        message = payload["error"].get("message")
    return message or response.reason or f"HTTP {response.status_code}"


class ReportClient:
    """
    Turns a note or a session snapshot into generated text.

    Blocking: waits between attempts with `sleep`, so run it off the GUI
    thread (see chronos.ui.report_worker).
    """

    def __init__(
        self,
        credentials,
        settings: Optional[AppSettings] = None,
        http: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.credentials = credentials
        self.apply_settings(settings or AppSettings())
        self.http = http or requests.Session()
        self._sleep = sleep

    def apply_settings(self, settings: AppSettings):
        self.max_attempts = max(1, int(settings.max_attempts))
        self.timeout_s = float(settings.request_timeout_s)
        self.model = settings.model
        self.endpoint = f"{API_ROOT}/{self.model}:generateContent"

    # -----------------------
    # Public calls
    # -----------------------

    def polish(self, note: str) -> str:
        return self._fetch_with_retry(build_request_body(polish_prompt(note), POLISH_CONFIG))

    def generate_report(self, snapshot: SessionSnapshot) -> str:
        return self._fetch_with_retry(build_request_body(report_prompt(snapshot), REPORT_CONFIG))

    # -----------------------
    # Retry loop
    # -----------------------

    def _fetch_with_retry(self, body: Dict[str, Any]) -> str:
        api_key = self.credentials.get()
        if not api_key:
            raise MissingCredential()

        attempt = 0
        while True:
            try:
                return self._attempt(api_key, body, attempt)
            except NonRetryableApiError:
                raise
            except Exception as e:
                logger.warning("Attempt %d/%d failed: %s", attempt + 1, self.max_attempts, e)
                attempt += 1
                if attempt >= self.max_attempts:
                    raise
                delay = 2 ** attempt
                logger.info("Retrying in %d seconds", delay)
                self._sleep(delay)

    def _attempt(self, api_key: str, body: Dict[str, Any], attempt: int) -> str:
        response = self.http.post(
            self.endpoint,
            params={"key": api_key},
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout_s,
        )

        if not response.ok:
            if response.status_code >= 500 and attempt < self.max_attempts - 1:
                raise TransientServerError(response.status_code)
            raise NonRetryableApiError(response.status_code, _error_message(response))

        payload = response.json()
        try:
            return extract_text(payload)
        except ParseFailure:
            logger.error("Invalid response structure: %r", payload)
            raise
