# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from ..config import load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed HttpSettings."""
    return RetryConfig.from_settings(load_http_settings())


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """
    Execute a request, retrying transport failures with exponential backoff.

    Responses that carry a status code (including 4xx/5xx) are returned as-is;
    only failures without one are retried.
    """
    cfg = retry_config or build_default_retry_config()
    attempts = max(1, cfg.max_attempts)
    delay = cfg.initial_delay
    response = HttpResponse(ok=False, error_message="No attempt made")

    for attempt in range(attempts):
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse.from_exception(exc, categorize_exception(exc))

        if response.ok or response.status_code is not None:
            if attempt:
                response.meta["retry_count"] = attempt
            return response

        if attempt + 1 >= attempts:
            break
        logger.debug("Retrying %s %s after %s (attempt %d/%d)", request.method, request.url, response.error_type, attempt + 1, attempts)
        time.sleep(delay)
        delay *= cfg.backoff_factor

    response.meta.setdefault("retry_count", attempts - 1)
    response.meta.setdefault("retry_exhausted", True)
    return response
