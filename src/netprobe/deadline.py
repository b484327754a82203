# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wall-clock bounds for blocking calls that have no timeout of their own."""

from __future__ import annotations

import threading
from typing import Callable, TypeVar

T = TypeVar("T")


class DeadlineExceeded(TimeoutError):
    """Raised when a call does not finish within its deadline."""


def call_with_deadline(func: Callable[[], T], seconds: float, *, name: str = "netprobe-deadline") -> T:
    """
    Run `func()` on a daemon thread and wait at most `seconds` for it.

    Exceptions raised by `func` are re-raised in the caller. On expiry the
    thread is abandoned; being a daemon it never holds up interpreter exit.
    """
    outcome: dict[str, object] = {}

    def run() -> None:
        try:
            outcome["result"] = func()
        except BaseException as exc:  # noqa: BLE001
            outcome["error"] = exc

    worker = threading.Thread(target=run, name=name, daemon=True)
    worker.start()
    worker.join(max(0.0, seconds))
    if worker.is_alive():
        raise DeadlineExceeded(f"no result within {seconds:.2f}s")
    if "error" in outcome:
        raise outcome["error"]  # type: ignore[misc]
    return outcome["result"]  # type: ignore[return-value]


__all__ = ["DeadlineExceeded", "call_with_deadline"]
