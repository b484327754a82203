# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for netprobe."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"netprobe/{__version__}"
DEFAULT_SERVICES_FILE = "/etc/services"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(*names: str, default: str) -> str:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return default


@dataclass
class PortSettings:
    """Port probing defaults."""

    timeout: float = 1.0
    max_attempts: int = 50
    services_file: str = DEFAULT_SERVICES_FILE

    @classmethod
    def from_env(cls) -> "PortSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("NETPROBE_PORT_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_attempts = _int_env("NETPROBE_PORT_MAX_ATTEMPTS", cls.max_attempts)
        if max_attempts <= 0:
            max_attempts = cls.max_attempts
        return cls(
            timeout=timeout,
            max_attempts=max_attempts,
            # SERVICES_FILE_PATH is honored for compatibility with older deployments.
            services_file=_str_env("NETPROBE_SERVICES_FILE", "SERVICES_FILE_PATH", default=cls.services_file),
        )


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    timeout: float = 10.0
    deadline_grace: float = 3.0
    max_retries: int = 1
    backoff_factor: float = 2.0
    initial_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        deadline_grace = _float_env("NETPROBE_HTTP_DEADLINE_GRACE", cls.deadline_grace)
        if deadline_grace < 0:
            deadline_grace = cls.deadline_grace
        return cls(
            timeout=_float_env("NETPROBE_HTTP_TIMEOUT", cls.timeout),
            deadline_grace=deadline_grace,
            max_retries=_int_env("NETPROBE_HTTP_RETRIES", cls.max_retries),
            backoff_factor=_float_env("NETPROBE_HTTP_BACKOFF", cls.backoff_factor),
            initial_delay=_float_env("NETPROBE_HTTP_INITIAL_DELAY", cls.initial_delay),
            user_agent=os.getenv("NETPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("NETPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("NETPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_port_settings() -> PortSettings:
    """Load port probing settings from environment with sensible defaults."""
    return PortSettings.from_env()


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
