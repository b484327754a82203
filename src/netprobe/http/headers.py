# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Metadata is cached
as a plain lowercase-keyed dict; repeated fields are folded into one
comma-separated value, which is how a multi-valued Content-Type reaches the
content-type parser.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _header_items(headers: Any) -> Iterable[tuple[object, object]]:
    if isinstance(headers, Mapping):
        return headers.items()
    multi_items = getattr(headers, "multi_items", None)
    if callable(multi_items):
        return multi_items()
    items = getattr(headers, "items", None)
    if callable(items):
        return items()
    return headers


def normalize_headers(headers: Any) -> dict[str, str]:
    """
    Return a lowercase-keyed copy of a header container.

    Accepts plain dicts, httpx.Headers, HTTPMessage-like objects and
    iterables of (name, value) pairs.
    """
    if not headers:
        return {}
    out: dict[str, str] = {}
    try:
        pairs = list(_header_items(headers))
    except (TypeError, ValueError):
        return {}
    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            continue
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        text = "" if value is None else str(value).strip()
        if name in out and text:
            out[name] = f"{out[name]}, {text}" if out[name] else text
        else:
            out[name] = text
    return out


def header_value(headers: Mapping[str, str] | None, name: str, default: str | None = None) -> str | None:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default
    lower = name.lower()
    if lower in headers:
        return headers[lower]
    for key, value in headers.items():
        if str(key).lower() == lower:
            return value
    return default


__all__ = ["header_value", "normalize_headers"]
