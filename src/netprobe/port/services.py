# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Well-known services lookup (`/etc/services` format).

Each entry reads `name port/protocol [alias ...] [# description]`. The table
is re-read on every lookup. A missing table yields None; a table without the
requested port yields an empty list.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from ..config import load_port_settings
from ..models.service import Protocol, ServiceRecord

logger = logging.getLogger(__name__)

_SERVICE_LINE_RE = re.compile(r"^\s*(?P<name>[^\s#]+)\s+(?P<port>\d{1,5})/(?P<protocol>[A-Za-z]+)(?=\s|#|$)(?P<rest>.*)$")


def parse_service_line(line: str) -> ServiceRecord | None:
    """Parse one table line; blank, comment and malformed lines give None."""
    match = _SERVICE_LINE_RE.match(line or "")
    if not match:
        return None

    port = int(match.group("port"))
    protocol = Protocol.parse(match.group("protocol"))
    if protocol is None or port > 65535:
        return None

    rest = match.group("rest")
    aliases_part, _, description = rest.partition("#")
    return ServiceRecord(
        name=match.group("name"),
        port=port,
        protocol=protocol,
        description=" ".join(description.split()),
        aliases=tuple(aliases_part.split()),
    )


def parse_services(lines: Iterable[str]) -> list[ServiceRecord]:
    """Parse every recognizable entry, skipping lines that are not entries."""
    return [record for record in map(parse_service_line, lines) if record is not None]


def services_file_path(path: str | Path | None = None) -> Path:
    """Resolve the services table location (argument, then environment, then /etc/services)."""
    return Path(path) if path else Path(load_port_settings().services_file)


def load_services(path: str | Path | None = None) -> list[ServiceRecord] | None:
    """
    Read and parse the whole services table.

    Returns None when the file does not exist; other I/O errors propagate.
    """
    table = services_file_path(path)
    try:
        text = table.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.debug("Services table %s not found", table)
        return None
    return parse_services(text.splitlines())


def service_info(
    port: int | None,
    *,
    path: str | Path | None = None,
    protocol: Protocol | str | None = None,
) -> list[ServiceRecord] | None:
    """
    Return every services-table entry assigned to `port`.

    All protocol variants are returned unless `protocol` narrows the result.
    """
    records = load_services(path)
    if records is None:
        return None

    try:
        wanted_port = int(port)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return []

    wanted_protocol = Protocol.parse(protocol) if protocol is not None else None
    if protocol is not None and wanted_protocol is None:
        return []

    return [
        record
        for record in records
        if record.port == wanted_port and (wanted_protocol is None or record.protocol is wanted_protocol)
    ]


def service_name(
    port: int | None,
    *,
    path: str | Path | None = None,
    protocol: Protocol | str | None = None,
) -> list[str] | None:
    """Return the names of the services assigned to `port` (None when the table is missing)."""
    records = service_info(port, path=path, protocol=protocol)
    if records is None:
        return None
    return [record.name for record in records]


__all__ = [
    "load_services",
    "parse_service_line",
    "parse_services",
    "service_info",
    "service_name",
    "services_file_path",
]
