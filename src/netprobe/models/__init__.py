# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for netprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryConfig
from .resource import ResourceMetadata
from .service import Protocol, ServiceRecord

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "Protocol",
    "ResourceMetadata",
    "RetryConfig",
    "ServiceRecord",
]
