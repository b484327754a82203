# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote resource introspection via HEAD requests."""

from __future__ import annotations

import logging
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import ErrorCategory, error_category_to_reason
from ..http.adapters import DeadlineHttpClient
from ..http.client import HttpClient, create_default_http_client
from ..http.headers import header_value, normalize_headers
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import send_with_retries
from ..http.url import encode_url, is_valid_url
from ..models.resource import ResourceMetadata
from .content_type import matches_any, normalize_type_tokens, parse_content_length, parse_content_type

logger = logging.getLogger(__name__)


def _normalize_url(url: Any) -> str:
    if url is None:
        return ""
    if isinstance(url, (bytes, bytearray)):
        return bytes(url).decode("utf-8", errors="replace")
    return str(url)


def build_metadata(response: HttpResponse) -> ResourceMetadata:
    """Derive ResourceMetadata from a completed HEAD response."""
    headers = normalize_headers(response.headers)
    return ResourceMetadata(
        headers=headers,
        content_type=parse_content_type(header_value(headers, "Content-Type")),
        size=parse_content_length(header_value(headers, "Content-Length")),
        status_code=response.status_code,
        url=response.url,
    )


class ResourceProbe:
    """
    Facts about a remote resource (existence, size, content types) without
    downloading its body.

    The first successful HEAD response is cached on the instance and reused by
    every accessor; failures are not cached, so the next call retries. Every
    network failure surfaces as None/False/0, and `last_error` keeps the
    category of the most recent one.

    Instances are not thread-safe; do not share one between threads without
    external locking.
    """

    def __init__(
        self,
        url: Any,
        request_timeout: float | None = None,
        *,
        http_client: HttpClient | None = None,
        settings: HttpSettings | None = None,
    ):
        self.url = _normalize_url(url)
        self.settings = settings or load_http_settings()
        self.request_timeout = float(request_timeout) if request_timeout is not None else self.settings.timeout
        self._owns_client = http_client is None
        self._http_client = http_client
        self._metadata: ResourceMetadata | None = None
        self.last_error = ErrorCategory.NONE

    def _client(self) -> HttpClient:
        if self._http_client is None:
            self._http_client = create_default_http_client(self.settings)
        elif not isinstance(self._http_client, DeadlineHttpClient):
            self._http_client = DeadlineHttpClient(self._http_client, grace=self.settings.deadline_grace)
        return self._http_client

    def _fail(self, category: ErrorCategory) -> None:
        self.last_error = category
        logger.debug("No metadata for %s: %s", self.url, error_category_to_reason(category))
        return None

    def fetch_metadata(self) -> ResourceMetadata | None:
        """Return cached metadata, or HEAD the URL and cache the result on success."""
        if self._metadata is not None:
            return self._metadata
        if not self.url:
            return self._fail(ErrorCategory.INVALID_INPUT)
        encoded_url = encode_url(self.url)
        if encoded_url is None:
            return self._fail(ErrorCategory.INVALID_INPUT)

        request = HttpRequest(
            url=encoded_url,
            method="HEAD",
            timeout=self.request_timeout,
            allow_redirects=self.settings.allow_redirects,
        )
        response = send_with_retries(self._client(), request, retry_config=RetryConfig.from_settings(self.settings))
        if not response.ok:
            category = response.error_category
            return self._fail(category if category is not ErrorCategory.NONE else ErrorCategory.UNKNOWN_ERROR)
        if response.is_error_status:
            return self._fail(ErrorCategory.HTTP_ERROR)

        self._metadata = build_metadata(response)
        self.last_error = ErrorCategory.NONE
        return self._metadata

    def headers(self) -> dict[str, str] | None:
        """Lowercase-keyed response headers, or None when the resource is unavailable."""
        metadata = self.fetch_metadata()
        return metadata.headers if metadata is not None else None

    def size(self) -> int:
        """Declared Content-Length in bytes; 0 when unknown."""
        metadata = self.fetch_metadata()
        return metadata.size if metadata is not None else 0

    def content_type(self) -> list[str] | None:
        """Base media types from Content-Type, in header order."""
        metadata = self.fetch_metadata()
        return metadata.content_type if metadata is not None else None

    def matches_type(self, types: Any) -> bool:
        """
        Check the resource against one or more media-type prefixes.

        `"text"`, `"text/html"` and `["image", "application/pdf"]` are all
        accepted. Empty input returns False without a request.
        """
        tokens = normalize_type_tokens(types)
        if not tokens:
            return False
        return matches_any(self.content_type(), tokens)

    def is_valid_syntax(self) -> bool:
        """Offline check of the URL's shape."""
        return is_valid_url(self.url)

    def is_valid_and_live(self) -> bool:
        """Syntax check plus a successful HEAD request."""
        return self.is_valid_syntax() and self.fetch_metadata() is not None

    is_valid = is_valid_syntax
    is_valid_online = is_valid_and_live
    is_type = matches_type

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "ResourceProbe":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def __repr__(self) -> str:
        return f"ResourceProbe(url={self.url!r}, request_timeout={self.request_timeout!r})"
