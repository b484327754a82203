# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote resource introspection."""

from .content_type import matches_any, normalize_type_tokens, parse_content_length, parse_content_type
from .probe import ResourceProbe, build_metadata

__all__ = [
    "ResourceProbe",
    "build_metadata",
    "matches_any",
    "normalize_type_tokens",
    "parse_content_length",
    "parse_content_type",
]
