# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cookie model shared by the web context and the raw handles.

Raw handles hand out `http.cookies.Morsel` objects; the web context translates them into
`Cookie` values and serializes outgoing cookies into `Set-Cookie` header values.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from email.utils import formatdate
from http.cookies import Morsel

SESSION_MAX_AGE = -1


@dataclass
class Cookie:
    """Framework-agnostic cookie. `max_age == -1` marks a session cookie."""

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    max_age: int = SESSION_MAX_AGE
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None
    comment: str | None = None

    @classmethod
    def from_morsel(cls, morsel: Morsel) -> Cookie:
        """Translate a raw request cookie, attribute for attribute."""
        return cls(
            name=morsel.key,
            value=morsel.value,
            domain=morsel["domain"] or None,
            path=morsel["path"] or None,
            max_age=_parse_max_age(morsel["max-age"]),
            secure=bool(morsel["secure"]),
            http_only=bool(morsel["httponly"]),
            same_site=morsel["samesite"] or None,
            comment=morsel["comment"] or None,
        )

    def to_morsel(self) -> Morsel:
        morsel: Morsel = Morsel()
        morsel.set(self.name, self.value, self.value)
        if self.domain:
            morsel["domain"] = self.domain
        if self.path:
            morsel["path"] = self.path
        if self.max_age > SESSION_MAX_AGE:
            morsel["max-age"] = str(self.max_age)
        if self.secure:
            morsel["secure"] = True
        if self.http_only:
            morsel["httponly"] = True
        if self.same_site:
            morsel["samesite"] = self.same_site
        if self.comment:
            morsel["comment"] = self.comment
        return morsel


def _parse_max_age(raw: object) -> int:
    if raw in (None, ""):
        return SESSION_MAX_AGE
    try:
        return int(str(raw).strip())
    except ValueError:
        return SESSION_MAX_AGE


def _format_expires(max_age: int, now: float | None) -> str:
    # max_age == 0 expires at the epoch so clients drop the cookie immediately.
    timestamp = 0.0 if max_age == 0 else (time.time() if now is None else now) + max_age
    return formatdate(timestamp, usegmt=True)


def build_set_cookie_header(cookie: Cookie, *, default_same_site: str = "lax", now: float | None = None) -> str:
    """
    Serialize a cookie into a single `Set-Cookie` header value.

    Attribute order: Max-Age/Expires, Domain, Path (defaults to "/"), SameSite, Secure,
    HttpOnly, Comment. Values are emitted verbatim; no attribute validation is done.
    """
    parts = [f"{cookie.name}={cookie.value}"]
    if cookie.max_age > SESSION_MAX_AGE:
        parts.append(f"Max-Age={cookie.max_age}")
        parts.append(f"Expires={_format_expires(cookie.max_age, now)}")
    if cookie.domain and cookie.domain.strip():
        parts.append(f"Domain={cookie.domain}")
    parts.append(f"Path={cookie.path if cookie.path and cookie.path.strip() else '/'}")

    same_site = (cookie.same_site or default_same_site or "lax").strip().lower()
    if same_site == "strict":
        parts.append("SameSite=Strict")
    elif same_site == "none":
        parts.append("SameSite=None")
    else:
        parts.append("SameSite=Lax")

    # Browsers reject SameSite=None without Secure.
    if cookie.secure or same_site == "none":
        parts.append("Secure")
    if cookie.http_only:
        parts.append("HttpOnly")
    if cookie.comment:
        parts.append(f"Comment={cookie.comment}")
    return "; ".join(parts)


__all__ = ["Cookie", "SESSION_MAX_AGE", "build_set_cookie_header"]
