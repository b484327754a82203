# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Content-Type / Content-Length header parsing and media-type matching."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any


def parse_content_type(value: str | None) -> list[str] | None:
    """
    Split a Content-Type header into base media types, in header order.

    `application/json, text/plain; charset=UTF-8` -> `["application/json", "text/plain"]`
    """
    if value is None:
        return None
    types: list[str] = []
    for part in value.split(","):
        base = part.split(";", 1)[0].strip()
        if base:
            types.append(base)
    return types


def parse_content_length(value: str | None) -> int:
    """Return the declared body size, 0 when absent or unparseable."""
    if not value:
        return 0
    # Repeated headers are folded as "n, n".
    first = value.split(",", 1)[0].strip()
    try:
        size = int(first)
    except ValueError:
        return 0
    return max(0, size)


def _token_text(token: Any) -> str:
    if isinstance(token, Enum):
        token = token.value
    return "" if token is None else str(token).strip()


def normalize_type_tokens(types: Any) -> list[str]:
    """Accept one token (str, Enum, anything str()-able) or a collection of them."""
    if types is None:
        return []
    if isinstance(types, (str, bytes, Enum)) or not isinstance(types, Iterable):
        candidates: Iterable[Any] = [types.decode("utf-8", errors="replace") if isinstance(types, bytes) else types]
    else:
        candidates = types
    tokens = [_token_text(token) for token in candidates]
    return [token for token in tokens if token]


def matches_any(content_types: Iterable[str] | None, tokens: Iterable[str]) -> bool:
    """True when some token is a (case-insensitive) prefix of some content type."""
    if not content_types:
        return False
    lowered = [content_type.lower() for content_type in content_types]
    return any(content_type.startswith(token.lower()) for token in tokens for content_type in lowered)


__all__ = ["matches_any", "normalize_type_tokens", "parse_content_length", "parse_content_type"]
