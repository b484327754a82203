# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers: offline shape validation and percent-encoding."""

from __future__ import annotations

import re
from urllib.parse import quote

_OCTET = r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
_IPV4 = rf"{_OCTET}(?:\.{_OCTET}){{3}}"
_IPV6 = r"\[[0-9a-f:.]+\]"
_LABEL_CHARS = r"a-z\u00a1-\uffff0-9"
_HOSTNAME = rf"[{_LABEL_CHARS}](?:[{_LABEL_CHARS}-]{{0,61}}[{_LABEL_CHARS}])?"
_DOMAIN = rf"(?:\.(?!-)[{_LABEL_CHARS}-]{{1,63}}(?<!-))*"
_TLD = r"\.(?!-)(?:[a-z\u00a1-\uffff-]{2,63}|xn--[a-z0-9]{1,59})(?<!-)\.?"
_HOST = rf"(?:{_HOSTNAME}{_DOMAIN}{_TLD}|localhost)"

URL_PATTERN = re.compile(
    r"\A(?:https?|ftp)://"
    r"(?:[^\s:@/]+(?::[^\s:@/]*)?@)?"
    rf"(?:{_IPV4}|{_IPV6}|{_HOST})"
    r"(?::\d{1,5})?"
    r"(?:[/?#]\S*)?\Z",
    re.IGNORECASE,
)

# Reserved characters plus "%" so already-encoded URLs pass through unchanged.
_URL_SAFE_CHARS = "/:?#[]@!$&'()*+,;=%~"


def is_valid_url(url: str | None) -> bool:
    """Return True when `url` has the shape of an absolute http(s)/ftp URL."""
    if not url:
        return False
    return URL_PATTERN.match(url) is not None


def encode_url(url: str | None) -> str | None:
    """
    Percent-encode characters that may not appear literally in a URL.

    Non-ASCII text is encoded as UTF-8 and whitespace as `%20`; reserved
    delimiters and existing escapes are left alone. Returns None for empty
    input or text that cannot be encoded (e.g. lone surrogates).
    """
    if not url:
        return None
    try:
        return quote(url, safe=_URL_SAFE_CHARS, encoding="utf-8", errors="strict")
    except (TypeError, UnicodeError):
        return None


__all__ = ["URL_PATTERN", "encode_url", "is_valid_url"]
