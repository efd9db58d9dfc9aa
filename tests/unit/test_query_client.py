"""
Unit Tests for the Public Query Client

Transport failures are simulated with httpx.MockTransport handlers that
raise httpx transport errors.

Run with:
    pytest tests/unit/test_query_client.py -v
"""

import time

import httpx
import pytest

from core.exceptions import NetworkExhausted
from core.query_client import PublicQueryClient


URL = "https://venue.example/public?command=returnTicker"


class FlakyHandler:
    """Fails the first `failures` requests with a connect error"""

    def __init__(self, failures, body="ok", status=200):
        self.failures = failures
        self.body = body
        self.status = status
        self.calls = 0

    def __call__(self, request):
        self.calls += 1
        if self.calls <= self.failures:
            raise httpx.ConnectError(f"connection refused #{self.calls}", request=request)
        return httpx.Response(self.status, text=f"{self.body} #{self.calls}")


def make_client(handler, **kwargs):
    return PublicQueryClient(max_attempts=5, transport=httpx.MockTransport(handler), **kwargs)


class TestRetries:

    def test_first_success_returns_immediately(self):
        handler = FlakyHandler(failures=0)
        with make_client(handler) as client:
            assert client.query(URL) == "ok #1"
        assert handler.calls == 1

    def test_succeeds_on_fifth_attempt(self):
        handler = FlakyHandler(failures=4)
        with make_client(handler) as client:
            assert client.query(URL) == "ok #5"
        assert handler.calls == 5

    def test_exhausted_after_five_failures(self):
        handler = FlakyHandler(failures=5)
        with make_client(handler) as client:
            with pytest.raises(NetworkExhausted) as exc_info:
                client.query(URL, prefix="[Dummy] ")
        assert handler.calls == 5
        assert "connection refused #5" in str(exc_info.value)
        assert str(exc_info.value).startswith("[Dummy] Could not get reply")
        assert exc_info.value.context == {"url": URL, "attempts": 5}

    def test_timeouts_are_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, text="late")

        with make_client(handler) as client:
            assert client.query(URL) == "late"
        assert len(calls) == 2

    def test_http_error_status_is_not_retried(self):
        handler = FlakyHandler(failures=0, body="maintenance", status=503)
        with make_client(handler) as client:
            assert client.query(URL) == "maintenance #1"
        assert handler.calls == 1

    def test_failed_attempts_are_logged(self, caplog):
        with make_client(FlakyHandler(failures=2)) as client:
            client.query(URL)
        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 2


class TestClientSetup:

    def test_query_json_decodes_body(self):
        handler = lambda request: httpx.Response(200, json={"LTC_BTC": {"last": "0.01"}})
        with make_client(handler) as client:
            assert client.query_json(URL) == {"LTC_BTC": {"last": "0.01"}}

    def test_user_agent_header_is_sent(self):
        seen = {}

        def handler(request):
            seen["ua"] = request.headers["User-Agent"]
            return httpx.Response(200, text="")

        with make_client(handler, user_agent="coinbridge-test") as client:
            client.query(URL)
        assert seen["ua"] == "coinbridge-test"

    def test_defaults_follow_settings(self):
        client = PublicQueryClient()
        assert client.max_attempts == 5
        assert client.connect_timeout == 15
        assert client.timeout == 60
        assert client.verify_tls is False

    def test_timeouts_are_applied_to_session(self):
        with make_client(FlakyHandler(failures=0)) as client:
            timeout = client.client.timeout
            assert timeout.connect == 15
            assert timeout.read == 60

    def test_close_allows_reopening(self):
        client = make_client(FlakyHandler(failures=0))
        first = client.client
        client.close()
        assert client.client is not first
        client.close()


class TestDeadline:

    def test_trickling_body_counts_as_transport_failure(self):
        calls = []

        def slow_body():
            yield b"partial"
            time.sleep(0.2)
            yield b"rest"

        def handler(request):
            calls.append(request)
            return httpx.Response(200, content=slow_body())

        client = PublicQueryClient(max_attempts=2, timeout=0.05, transport=httpx.MockTransport(handler))
        with client:
            with pytest.raises(NetworkExhausted, match="Total timeout of 0.05s exceeded"):
                client.query(URL)
        assert len(calls) == 2

    def test_body_within_deadline_is_returned(self):
        def handler(request):
            return httpx.Response(200, content=iter([b"LTC_", b"BTC"]))

        with make_client(handler) as client:
            assert client.query(URL) == "LTC_BTC"


class TestSessionArguments:

    @pytest.fixture
    def recorded(self, monkeypatch):
        calls = []

        class RecordingClient:
            def __init__(self, **kwargs):
                calls.append(kwargs)

            def close(self):
                pass

        monkeypatch.setattr(httpx, "Client", RecordingClient)
        return calls

    def test_tls_verification_disabled_by_default(self, recorded):
        PublicQueryClient().client
        assert recorded[0]["verify"] is False
        assert recorded[0]["timeout"].connect == 15

    def test_tls_verification_can_be_enabled(self, recorded):
        PublicQueryClient(verify_tls=True).client
        assert recorded[0]["verify"] is True

    def test_session_is_created_once(self, recorded):
        client = PublicQueryClient()
        assert client.client is client.client
        assert len(recorded) == 1
