# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote resource metadata model."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResourceMetadata:
    """
    Facts derived from a single successful HEAD response.

    `headers` is keyed by lowercased header name. `content_type` holds the base
    media types in header order, or None when the response carried no
    Content-Type header.
    """

    headers: dict[str, str] = field(default_factory=dict)
    content_type: list[str] | None = None
    size: int = 0
    status_code: int | None = None
    url: str | None = None
