# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper that never reads response bodies."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                return HttpResponse(
                    ok=True,
                    status_code=resp.status_code,
                    headers=normalize_headers(resp.headers),
                    url=str(resp.url),
                    meta={"redirects": len(resp.history)},
                )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("%s %s failed (%s): %s", request.method, request.url, category.value, exc)
            return HttpResponse.from_exception(exc, category)

    def close(self) -> None:
        self._client.close()
