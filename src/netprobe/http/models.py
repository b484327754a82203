# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the resource probe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import HttpSettings
from ..errors import ErrorCategory

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "HEAD"
    headers: Headers | None = None
    timeout: float | None = None
    allow_redirects: bool = True


@dataclass
class HttpResponse:
    """
    Normalized HTTP exchange outcome.

    `ok` means the exchange completed (a status line was received); it says
    nothing about the status class. Transport failures carry `ok=False`, no
    status code, and an `error_category`.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_error_status(self) -> bool:
        """True for 4xx client and 5xx server error responses."""
        return self.status_code is not None and 400 <= self.status_code < 600

    @classmethod
    def from_exception(cls, exc: BaseException, category: ErrorCategory) -> HttpResponse:
        return cls(
            ok=False,
            error_message=str(exc),
            error_type=type(exc).__name__,
            error_category=category,
        )


@dataclass
class RetryConfig:
    """Retry policy for HTTP requests derived from HttpSettings."""

    max_attempts: int = 1
    backoff_factor: float = 2.0
    initial_delay: float = 1.0

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> RetryConfig:
        """Build a retry config from the shared HttpSettings."""
        return cls(
            max_attempts=max(1, settings.max_retries),
            backoff_factor=settings.backoff_factor,
            initial_delay=settings.initial_delay,
        )
