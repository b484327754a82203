# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import os
import subprocess
import sys
import textwrap
import time
from pathlib import Path

import httpx
import pytest

from netprobe.config import HttpSettings
from netprobe.deadline import DeadlineExceeded, call_with_deadline
from netprobe.errors import ErrorCategory
from netprobe.http import create_default_http_client
from netprobe.http.adapters import DeadlineHttpClient, StubHttpClient
from netprobe.http.headers import header_value, normalize_headers
from netprobe.http.httpx_client import HttpxClient
from netprobe.http.models import HttpRequest, HttpResponse, RetryConfig
from netprobe.http.retry import build_default_retry_config, send_with_retries
from netprobe.http.url import encode_url, is_valid_url


class SequenceHttpClient:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        self.calls += 1
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:
        self.closed = True


def test_http_response_error_status():
    assert HttpResponse(ok=True, status_code=404).is_error_status is True
    assert HttpResponse(ok=True, status_code=503).is_error_status is True
    assert HttpResponse(ok=True, status_code=204).is_error_status is False
    assert HttpResponse(ok=True, status_code=302).is_error_status is False
    assert HttpResponse(ok=False).is_error_status is False


def test_http_response_from_exception():
    resp = HttpResponse.from_exception(ConnectionRefusedError("refused"), ErrorCategory.CONNECTION_REFUSED)
    assert resp.ok is False
    assert resp.error_type == "ConnectionRefusedError"
    assert resp.error_category is ErrorCategory.CONNECTION_REFUSED


def test_retry_config_from_settings_clamps_minimum():
    settings = HttpSettings(max_retries=0)
    retry = RetryConfig.from_settings(settings)
    assert retry.max_attempts == 1
    assert retry.backoff_factor == settings.backoff_factor


def test_build_default_retry_config_is_single_attempt():
    assert build_default_retry_config().max_attempts == 1


def test_send_with_retries_success_after_retry(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    client = SequenceHttpClient([HttpResponse(ok=False, error_message="timeout"), HttpResponse(ok=True, status_code=200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=3))
    assert result.ok is True
    assert result.meta["retry_count"] == 1
    assert client.calls == 2


def test_send_with_retries_does_not_retry_status_code_failures(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    client = SequenceHttpClient([HttpResponse(ok=False, status_code=500), HttpResponse(ok=True)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=3))
    assert result.status_code == 500
    assert client.calls == 1


def test_send_with_retries_exhausts_attempts(monkeypatch):
    sleeps = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    client = SequenceHttpClient([HttpResponse(ok=False, error_message="down")])
    cfg = RetryConfig(max_attempts=3, backoff_factor=2.0, initial_delay=0.5)
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=cfg)
    assert result.ok is False
    assert result.meta["retry_exhausted"] is True
    assert client.calls == 3
    assert sleeps == [0.5, 1.0]


def test_send_with_retries_converts_exceptions():
    class Exploding:
        def request(self, request):  # noqa: ARG002
            raise ConnectionRefusedError("refused")

    result = send_with_retries(Exploding(), HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=1))
    assert result.ok is False
    assert result.error_category is ErrorCategory.CONNECTION_REFUSED


def test_normalize_headers_lowercases_and_folds_duplicates():
    pairs = [("Content-Type", "text/html"), ("content-type", "text/plain"), ("X-Empty", None), (None, "skip")]
    assert normalize_headers(pairs) == {"content-type": "text/html, text/plain", "x-empty": ""}
    assert normalize_headers(httpx.Headers([("Content-Type", "a"), ("Content-Type", "b")])) == {"content-type": "a, b"}
    assert normalize_headers(None) == {}
    assert normalize_headers(42) == {}


def test_header_value_is_case_insensitive():
    headers = {"Content-Length": "10"}
    assert header_value(headers, "content-length") == "10"
    assert header_value({"content-length": "10"}, "Content-Length") == "10"
    assert header_value(headers, "content-type") is None
    assert header_value(None, "content-type", "n/a") == "n/a"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("http://example.org/a b", "http://example.org/a%20b"),
        ("http://example.org/a%20b", "http://example.org/a%20b"),
        ("https://example.org/?q=ümlaut&x=1", "https://example.org/?q=%C3%BCmlaut&x=1"),
        ("", None),
        (None, None),
        ("http://example.org/\udfff", None),
    ],
)
def test_encode_url(raw, expected):
    assert encode_url(raw) == expected


def test_is_valid_url_basic():
    assert is_valid_url("https://example.org") is True
    assert is_valid_url("mailto:someone@example.org") is False
    assert is_valid_url(None) is False


def test_deadline_client_times_out_slow_requests():
    class Slow:
        def request(self, request):  # noqa: ARG002
            time.sleep(0.5)
            return HttpResponse(ok=True, status_code=200)

        def close(self):
            pass

    client = DeadlineHttpClient(Slow(), grace=0.05)
    started = time.monotonic()
    result = client.request(HttpRequest(url="http://example", timeout=0.05))
    assert time.monotonic() - started < 0.45
    assert result.ok is False
    assert result.error_type == "DeadlineExceeded"
    assert result.error_category is ErrorCategory.TIMEOUT


def test_deadline_client_passes_fast_responses_and_errors():
    stub = StubHttpClient({"http://ok": HttpResponse(ok=True, status_code=200)})
    client = DeadlineHttpClient(stub, grace=1)
    assert client.request(HttpRequest(url="http://ok", timeout=1)).status_code == 200
    assert client.request(HttpRequest(url="http://ok")).status_code == 200

    class Exploding:
        def request(self, request):  # noqa: ARG002
            raise OSError(113, "No route to host")

        def close(self):
            pass

    result = DeadlineHttpClient(Exploding()).request(HttpRequest(url="http://x", timeout=1))
    assert result.error_category is ErrorCategory.HOST_UNREACHABLE

    client.close()
    assert stub.closed is True


def test_stub_http_client_returns_registered_responses():
    stub = StubHttpClient()
    stub.add("http://example", HttpResponse(ok=True, status_code=200))
    assert stub.request(HttpRequest(url="http://example")).status_code == 200
    missing = stub.request(HttpRequest(url="http://missing"))
    assert missing.ok is False
    assert stub.calls == 2
    assert stub.requests[0].method == "HEAD"


def test_httpx_client_sends_user_agent_and_normalizes_headers():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["ua"] = request.headers.get("user-agent")
        captured["method"] = request.method
        return httpx.Response(200, headers={"Content-Type": "text/csv", "X-Trace": "abc"})

    settings = HttpSettings(user_agent="probe/1.0")
    client = HttpxClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))
    resp = client.request(HttpRequest(url="https://example.org/data.csv", timeout=2))
    assert resp.ok is True
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/csv"
    assert resp.headers["x-trace"] == "abc"
    assert resp.url == "https://example.org/data.csv"
    assert captured == {"ua": "probe/1.0", "method": "HEAD"}
    client.close()


def test_httpx_client_converts_exceptions():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("connect timed out", request=request)

    client = HttpxClient(HttpSettings(), client=httpx.Client(transport=httpx.MockTransport(handler)))
    resp = client.request(HttpRequest(url="https://example.org"))
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.error_type == "ConnectTimeout"
    assert resp.error_category is ErrorCategory.TIMEOUT


def test_create_default_http_client_wraps_httpx_with_deadline():
    settings = HttpSettings(timeout=4.0, deadline_grace=2.0)
    client = create_default_http_client(settings)
    try:
        assert isinstance(client, DeadlineHttpClient)
        assert client.grace == 2.0
        assert client.default_timeout == 4.0
    finally:
        client.close()


def test_call_with_deadline_returns_raises_and_expires():
    assert call_with_deadline(lambda: 42, 1) == 42

    def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        call_with_deadline(boom, 1)

    started = time.monotonic()
    with pytest.raises(DeadlineExceeded):
        call_with_deadline(lambda: time.sleep(2), 0.05)
    assert time.monotonic() - started < 1


TRICKLE_SCRIPT = textwrap.dedent(
    """
    import socket
    import threading
    import time

    from netprobe.config import HttpSettings
    from netprobe.resource import ResourceProbe

    server = socket.socket()
    server.bind(("127.0.0.1", 0))
    server.listen(1)

    def trickle():
        conn, _ = server.accept()
        conn.sendall(b"HTTP/1.1 200 OK\\r\\nX-Slow: ")
        while True:
            conn.sendall(b"a")
            time.sleep(0.1)

    threading.Thread(target=trickle, daemon=True).start()
    url = "http://127.0.0.1:%d/slow" % server.getsockname()[1]
    probe = ResourceProbe(url, 0.5, settings=HttpSettings(timeout=0.5, deadline_grace=0.2))
    started = time.monotonic()
    print("result", probe.fetch_metadata(), round(time.monotonic() - started, 2), flush=True)
    """
)


def test_trickling_server_does_not_block_interpreter_exit():
    src = Path(__file__).resolve().parents[2] / "src"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src), env.get("PYTHONPATH")]))

    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, "-c", TRICKLE_SCRIPT],
        capture_output=True,
        text=True,
        env=env,
        timeout=8,
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.startswith("result None")
    assert time.monotonic() - started < 5
