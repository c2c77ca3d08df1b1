# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Raw exchange handles and HTTP helpers."""

from .adapters import StubRequest, StubResponse
from .cookies import SESSION_MAX_AGE, Cookie, build_set_cookie_header
from .exchange import Exchange, RawRequest, RawResponse
from .headers import header_value, resolve_header_name
from .wsgi import WsgiRequest, WsgiResponse

__all__ = [
    "SESSION_MAX_AGE",
    "Cookie",
    "Exchange",
    "RawRequest",
    "RawResponse",
    "StubRequest",
    "StubResponse",
    "WsgiRequest",
    "WsgiResponse",
    "build_set_cookie_header",
    "header_value",
    "resolve_header_name",
]
