# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Well-known service records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Protocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"
    SCTP = "sctp"
    DDP = "ddp"

    @classmethod
    def parse(cls, value: Protocol | str | None) -> Protocol | None:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ServiceRecord:
    """One `name port/protocol [aliases] [# description]` entry of a services table."""

    name: str
    port: int
    protocol: Protocol
    description: str = ""
    aliases: tuple[str, ...] = ()
