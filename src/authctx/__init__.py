# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
authctx package entrypoint.

This package normalizes the raw request/response handle of one HTTP exchange into a
framework-agnostic context that authentication and authorization layers can consume.
Raw handles are abstracted behind small protocols, and the cookie model is a typed dataclass.
"""

from .config import ContextSettings, load_context_settings
from .context import WebContext
from .errors import AuthContextError, ContextPathError, ErrorCategory, TechnicalError
from .http import (
    Cookie,
    Exchange,
    RawRequest,
    RawResponse,
    StubRequest,
    StubResponse,
    WsgiRequest,
    WsgiResponse,
    build_set_cookie_header,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "AuthContextError",
    "ContextPathError",
    "ContextSettings",
    "Cookie",
    "ErrorCategory",
    "Exchange",
    "RawRequest",
    "RawResponse",
    "StubRequest",
    "StubResponse",
    "TechnicalError",
    "WebContext",
    "WsgiRequest",
    "WsgiResponse",
    "build_set_cookie_header",
    "load_context_settings",
    "setup_logging",
    "__version__",
]
