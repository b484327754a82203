# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TCP port probing and well-known services lookup."""

from .probe import (
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    IANA_PORT_RANGE,
    classify_connect_error,
    is_available,
    is_free,
    is_occupied,
    is_opened,
    random_free_port,
    random_port,
)
from .services import load_services, parse_service_line, parse_services, service_info, service_name

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_TIMEOUT",
    "IANA_PORT_RANGE",
    "classify_connect_error",
    "is_available",
    "is_free",
    "is_occupied",
    "is_opened",
    "load_services",
    "parse_service_line",
    "parse_services",
    "random_free_port",
    "random_port",
    "service_info",
    "service_name",
]
