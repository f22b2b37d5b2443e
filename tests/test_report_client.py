"""Tests for the Gemini client retry loop."""

from unittest.mock import Mock

import pytest
import requests

from chronos.core.report_client import (
    API_ROOT,
    MissingCredential,
    NonRetryableApiError,
    ParseFailure,
    ReportClient,
    TransientServerError,
    build_request_body,
    extract_text,
    POLISH_CONFIG,
)
from chronos.core.settings_store import AppSettings


def ok_response(text="Polished note"):
    r = Mock(ok=True, status_code=200, reason="OK")
    r.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return r


def error_response(status, reason="Error", payload=None):
    r = Mock(ok=False, status_code=status, reason=reason)
    if payload is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = payload
    return r


class FakeCredentials:
    def __init__(self, key="test-key"):
        self.key = key

    def get(self):
        return self.key

    def has_credential(self):
        return self.key is not None


@pytest.fixture
def sleeps():
    return []


def make_client(responses, sleeps, key="test-key", **settings):
    http = Mock()
    http.post.side_effect = responses
    client = ReportClient(FakeCredentials(key), AppSettings(**settings), http=http, sleep=sleeps.append)
    return client, http


class TestExtractText:
    def test_happy_path(self):
        assert extract_text({"candidates": [{"content": {"parts": [{"text": "hi"}]}}]}) == "hi"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {}}]},
            {"candidates": [{"content": {"parts": [{"text": 3}]}}]},
            None,
        ],
    )
    def test_malformed(self, payload):
        with pytest.raises(ParseFailure):
            extract_text(payload)


class TestRequestShape:
    def test_post_arguments(self, sleeps):
        client, http = make_client([ok_response()], sleeps, model="gemini-2.5-flash")
        assert client.polish("loud class") == "Polished note"

        args, kwargs = http.post.call_args
        assert args[0] == f"{API_ROOT}/gemini-2.5-flash:generateContent"
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["timeout"] == 60.0
        body = kwargs["json"]
        assert "loud class" in body["contents"][0]["parts"][0]["text"]
        assert body["generationConfig"] == {"temperature": 0.5, "maxOutputTokens": 256}

    def test_report_config(self, sleeps, sample_snapshot):
        client, http = make_client([ok_response("# Report")], sleeps)
        assert client.generate_report(sample_snapshot) == "# Report"
        body = http.post.call_args.kwargs["json"]
        assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 2048}

    def test_build_request_body(self):
        body = build_request_body("p", POLISH_CONFIG)
        assert body["contents"] == [{"parts": [{"text": "p"}]}]


class TestRetry:
    def test_recovers_after_two_server_errors(self, sleeps):
        client, http = make_client(
            [error_response(500), error_response(503), ok_response("done")], sleeps
        )
        assert client.polish("x") == "done"
        assert http.post.call_count == 3
        assert sleeps == [2, 4]

    def test_server_error_on_last_attempt_reports_api_message(self, sleeps):
        overloaded = {"error": {"message": "Backend overloaded"}}
        client, http = make_client(
            [error_response(500, payload=overloaded)] * 3, sleeps
        )
        with pytest.raises(NonRetryableApiError) as exc:
            client.polish("x")
        assert http.post.call_count == 3
        assert sleeps == [2, 4]
        assert exc.value.status == 500
        assert exc.value.api_message == "Backend overloaded"
        assert str(exc.value) == "API Error: Backend overloaded"

    def test_server_error_on_last_attempt_falls_back_to_reason(self, sleeps):
        client, _ = make_client(
            [error_response(503, reason="Service Unavailable")] * 3, sleeps
        )
        with pytest.raises(NonRetryableApiError) as exc:
            client.polish("x")
        assert str(exc.value) == "API Error: Service Unavailable"

    def test_earlier_server_errors_are_transient(self, sleeps):
        client, _ = make_client([error_response(500)], sleeps, max_attempts=2)
        with pytest.raises(TransientServerError):
            client._attempt("k", {}, 0)

    def test_client_error_is_not_retried(self, sleeps):
        payload = {"error": {"message": "API key not valid"}}
        client, http = make_client([error_response(400, payload=payload)], sleeps)
        with pytest.raises(NonRetryableApiError) as exc:
            client.polish("x")
        assert http.post.call_count == 1
        assert sleeps == []
        assert exc.value.api_message == "API key not valid"

    def test_parse_failure_is_retried_then_raised(self, sleeps):
        bad = Mock(ok=True, status_code=200, reason="OK")
        bad.json.return_value = {"candidates": []}
        client, http = make_client([bad, bad, bad], sleeps)
        with pytest.raises(ParseFailure):
            client.polish("x")
        assert http.post.call_count == 3
        assert sleeps == [2, 4]

    def test_network_error_is_retried(self, sleeps):
        client, http = make_client(
            [requests.ConnectionError("down"), ok_response("back")], sleeps
        )
        assert client.polish("x") == "back"
        assert sleeps == [2]

    def test_network_error_on_last_attempt_propagates(self, sleeps):
        client, http = make_client([requests.Timeout("slow")] * 2, sleeps, max_attempts=2)
        with pytest.raises(requests.Timeout):
            client.polish("x")
        assert sleeps == [2]

    def test_missing_key_makes_no_request(self, sleeps):
        client, http = make_client([], sleeps, key=None)
        with pytest.raises(MissingCredential):
            client.polish("x")
        http.post.assert_not_called()
        assert sleeps == []


class TestApplySettings:
    def test_updates_endpoint_and_limits(self, sleeps):
        client, _ = make_client([], sleeps)
        client.apply_settings(AppSettings(model="gemini-pro", max_attempts=5, request_timeout_s=10))
        assert client.endpoint.endswith("/gemini-pro:generateContent")
        assert client.max_attempts == 5
        assert client.timeout_s == 10.0
