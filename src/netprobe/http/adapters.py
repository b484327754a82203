# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HttpClient wrappers: outer deadline enforcement and a programmable stub."""

from __future__ import annotations

import logging

from ..deadline import DeadlineExceeded, call_with_deadline
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_GRACE = 3.0


class DeadlineHttpClient(HttpClient):
    """
    Bound every request by `request.timeout + grace` seconds of wall time.

    The wrapped client keeps its own (shorter) timeout; the outer deadline only
    fires when that inner timeout fails to, e.g. a server trickling bytes that
    keeps resetting a per-read timer. Both outcomes surface as a TIMEOUT
    response. On expiry the request is left running on a daemon thread, so a
    stalled transfer never blocks interpreter exit.
    """

    def __init__(self, inner: HttpClient, *, grace: float = DEFAULT_DEADLINE_GRACE, default_timeout: float | None = None):
        self._inner = inner
        self.grace = max(0.0, float(grace))
        self.default_timeout = default_timeout

    def request(self, request: HttpRequest) -> HttpResponse:
        timeout = request.timeout if request.timeout is not None else self.default_timeout
        if timeout is None or timeout <= 0:
            return self._inner.request(request)

        deadline = timeout + self.grace
        try:
            return call_with_deadline(lambda: self._inner.request(request), deadline, name="netprobe-http")
        except DeadlineExceeded:
            logger.debug("%s %s exceeded the %.2fs deadline", request.method, request.url, deadline)
            return HttpResponse(
                ok=False,
                error_message=f"No response within {deadline:.2f}s",
                error_type="DeadlineExceeded",
                error_category=ErrorCategory.TIMEOUT,
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse.from_exception(exc, categorize_exception(exc))

    def close(self) -> None:
        self._inner.close()


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests."""

    def __init__(self, responses: dict[str, HttpResponse] | None = None):
        self._responses = responses or {}
        self.requests: list[HttpRequest] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(
            ok=False,
            error_message="No stubbed response configured",
            error_category=ErrorCategory.CONNECTION_REFUSED,
        )

    def close(self) -> None:
        self.closed = True
