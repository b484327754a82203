# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
netprobe package entrypoint.

Two independent, side-effect-free network probes:

- `netprobe.port`: TCP port availability, random free ports in the IANA
  dynamic range, and well-known service lookup from `/etc/services`.
- `netprobe.resource`: URL validation and HEAD-based metadata (size,
  content types) without downloading the body.

Network failures never raise; they come back as False/None/0.
"""

from .config import HttpSettings, PortSettings, load_http_settings, load_port_settings
from .errors import ErrorCategory, ErrorKind
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, create_default_http_client
from .log import setup_logging
from .models import Protocol, ResourceMetadata, ServiceRecord
from .port import (
    is_available,
    is_free,
    is_occupied,
    is_opened,
    random_free_port,
    random_port,
    service_info,
    service_name,
)
from .resource import ResourceProbe
from .version import __version__

__all__ = [
    "ErrorCategory",
    "ErrorKind",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "PortSettings",
    "Protocol",
    "ResourceMetadata",
    "ResourceProbe",
    "ServiceRecord",
    "create_default_http_client",
    "is_available",
    "is_free",
    "is_occupied",
    "is_opened",
    "load_http_settings",
    "load_port_settings",
    "random_free_port",
    "random_port",
    "service_info",
    "service_name",
    "setup_logging",
    "__version__",
]
