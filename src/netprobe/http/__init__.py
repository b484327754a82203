# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import DeadlineHttpClient, StubHttpClient
from .client import HttpClient, create_default_http_client
from .headers import header_value, normalize_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RetryConfig
from .retry import build_default_retry_config, send_with_retries
from .url import encode_url, is_valid_url

__all__ = [
    "DeadlineHttpClient",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RetryConfig",
    "StubHttpClient",
    "build_default_retry_config",
    "create_default_http_client",
    "encode_url",
    "header_value",
    "is_valid_url",
    "normalize_headers",
    "send_with_retries",
]
