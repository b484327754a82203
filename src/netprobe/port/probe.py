# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TCP port probing.

Availability is decided by a connect-and-close attempt rather than a bind, so
the same check works for remote hosts and for privileged ports without extra
rights. Every socket-level failure is turned into a boolean verdict.
"""

from __future__ import annotations

import logging
import numbers
import random
import socket
import time

from ..config import load_port_settings
from ..deadline import DeadlineExceeded, call_with_deadline
from ..errors import ErrorCategory, categorize_exception

logger = logging.getLogger(__name__)

# IANA dynamic/private range, 49152-65535 inclusive.
IANA_PORT_RANGE = range(49152, 65536)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_TIMEOUT = 1

# Connect failures meaning "nothing is listening there".
_NOTHING_LISTENING = frozenset(
    {
        ErrorCategory.CONNECTION_REFUSED,
        ErrorCategory.HOST_UNREACHABLE,
        ErrorCategory.NETWORK_UNREACHABLE,
    }
)


def _coerce_port(port: object) -> int | None:
    if not isinstance(port, numbers.Integral) or isinstance(port, bool):
        return None
    value = int(port)
    return value if 0 <= value <= 65535 else None


def _coerce_timeout(timeout: object) -> float | None:
    if timeout is None or isinstance(timeout, bool):
        return None
    try:
        value = float(timeout)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def classify_connect_error(exc: BaseException) -> ErrorCategory:
    """Classify a failed TCP connect attempt."""
    return categorize_exception(exc)


def _connect(host: str, port: int, seconds: float) -> None:
    """
    Connect to `host:port` and close again, all within `seconds` of wall time.

    Name resolution runs under the same deadline, and each resolved address
    only gets whatever time is left. Raises the last OSError when no address
    accepts the connection.
    """
    deadline = time.monotonic() + seconds
    infos = call_with_deadline(
        lambda: socket.getaddrinfo(host, port, type=socket.SOCK_STREAM),
        seconds,
        name="netprobe-resolve",
    )
    last_error: OSError | None = None
    for family, socktype, proto, _, address in infos:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise DeadlineExceeded(f"connect to {host}:{port} exceeded {seconds:.2f}s")
        sock = socket.socket(family, socktype, proto)
        try:
            sock.settimeout(remaining)
            sock.connect(address)
            return
        except OSError as exc:
            last_error = exc
        finally:
            sock.close()
    raise last_error or OSError(f"{host} did not resolve to any address")


def is_available(port: int | None, host: str | None = DEFAULT_HOST, timeout: float | None = DEFAULT_TIMEOUT) -> bool:
    """
    Check whether `port` is free on `host`.

    Returns True only when the connection is refused or the host is
    unreachable. A successful connect, a timeout, a name resolution failure or
    an unavailable address all return False. Missing or invalid arguments
    (a non-integral port, a non-positive timeout) return False without
    touching the network. The whole check, name resolution included, takes at
    most `timeout` seconds.
    """
    port_number = _coerce_port(port)
    seconds = _coerce_timeout(timeout)
    if port_number is None or seconds is None or not host:
        return False

    try:
        _connect(str(host), port_number, seconds)
    except OSError as exc:
        category = classify_connect_error(exc)
        logger.debug("Connect to %s:%s failed (%s): %s", host, port_number, category.value, exc)
        return category in _NOTHING_LISTENING
    return False


def is_opened(port: int | None, host: str | None = DEFAULT_HOST, timeout: float | None = DEFAULT_TIMEOUT) -> bool:
    """Check whether something is listening on `port` (the opposite of `is_available`)."""
    return not is_available(port, host, timeout)


is_free = is_available
is_occupied = is_opened


def random_port() -> int:
    """Pick a port uniformly from the IANA dynamic/private range."""
    return random.randint(IANA_PORT_RANGE.start, IANA_PORT_RANGE.stop - 1)


def random_free_port(max_attempts: int | None = None) -> int | None:
    """
    Pick a random port from the IANA range that is free on this machine.

    Each attempt draws independently, so the same port may be tried twice.
    Returns None once `max_attempts` draws all came back occupied.
    """
    settings = load_port_settings()
    attempts = settings.max_attempts if max_attempts is None else max_attempts
    for _ in range(max(0, attempts)):
        port = random_port()
        if is_available(port, DEFAULT_HOST, settings.timeout):
            return port
    logger.debug("No free port found after %d attempts", attempts)
    return None


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_TIMEOUT",
    "IANA_PORT_RANGE",
    "classify_connect_error",
    "is_available",
    "is_free",
    "is_occupied",
    "is_opened",
    "random_free_port",
    "random_port",
]
