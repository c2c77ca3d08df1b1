# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header name utilities.

HTTP header field names are case-insensitive (RFC 9110), but raw handles only promise exact
lookups. Names are resolved by scanning what the handle enumerates and then reading the value
back under the exact name that matched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

_CGI_HEADER_KEYS = {"CONTENT_TYPE", "CONTENT_LENGTH"}


def resolve_header_name(header_names: Iterable[str | None] | None, name: str | None) -> str | None:
    """
    Return the first enumerated header name equal to `name` ignoring case.

    None when there are no headers, no name, or no match.
    """
    if header_names is None or name is None:
        return None
    lower = str(name).lower()
    for candidate in header_names:
        if candidate is None:
            continue
        if str(candidate).lower() == lower:
            return candidate
    return None


def header_value(headers: Mapping[str, Any] | Iterable[tuple[str, Any]] | None, name: str | None) -> str | None:
    """Return the first value stored under `name` (case-insensitive) in a mapping or pair list."""
    if not headers or name is None:
        return None
    items = headers.items() if isinstance(headers, Mapping) else headers
    lower = str(name).lower()
    for key, value in items:
        if key is not None and str(key).lower() == lower:
            return None if value is None else str(value)
    return None


def environ_key_to_header_name(key: str) -> str:
    """
    Convert a WSGI environ key into a header name.

    Example:
      HTTP_X_FORWARDED_FOR -> X-Forwarded-For
      CONTENT_TYPE -> Content-Type
    """
    raw = key[5:] if key.startswith("HTTP_") else key
    return "-".join(part.capitalize() for part in raw.split("_"))


def header_name_to_environ_key(name: str) -> str:
    """Inverse of environ_key_to_header_name for lookups."""
    key = str(name).strip().upper().replace("-", "_")
    if key in _CGI_HEADER_KEYS:
        return key
    return f"HTTP_{key}"


def is_header_environ_key(key: object) -> bool:
    return isinstance(key, str) and (key.startswith("HTTP_") or key in _CGI_HEADER_KEYS)


__all__ = [
    "environ_key_to_header_name",
    "header_name_to_environ_key",
    "header_value",
    "is_header_environ_key",
    "resolve_header_name",
]
