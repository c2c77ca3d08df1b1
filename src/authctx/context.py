# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Framework-agnostic web context.

`WebContext` wraps the raw request/response of one HTTP exchange and exposes the normalized
surface an authentication layer reads from and writes to. It holds a non-owning reference to
the exchange and must be dropped when the exchange ends.

Not thread-safe: the memoized body is written on first read, and concurrent first reads on
the same instance are unsupported.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import ContextSettings, load_context_settings
from .errors import ContextPathError, TechnicalError
from .http.cookies import Cookie, build_set_cookie_header
from .http.exchange import Exchange, RawRequest, RawResponse
from .http.headers import resolve_header_name

logger = logging.getLogger(__name__)

SET_COOKIE_HEADER = "Set-Cookie"


class WebContext:
    """Normalized view over a single raw exchange."""

    def __init__(self, exchange: Exchange, settings: ContextSettings | None = None):
        self._exchange = exchange
        self.settings = settings or load_context_settings()
        self._body: str | None = None

    @classmethod
    def from_raw(cls, req: RawRequest, res: RawResponse, settings: ContextSettings | None = None) -> WebContext:
        return cls(Exchange(req=req, res=res), settings)

    @classmethod
    def from_wsgi(cls, environ: dict[str, Any], response: Any = None, settings: ContextSettings | None = None) -> WebContext:
        """Wrap a WSGI environ; a fresh WsgiResponse is created when none is given."""
        from .http.wsgi import WsgiRequest, WsgiResponse

        settings = settings or load_context_settings()
        return cls.from_raw(WsgiRequest(environ, settings), response or WsgiResponse(), settings)

    @property
    def native_context(self) -> Exchange:
        return self._exchange

    @property
    def _req(self) -> RawRequest:
        return self._exchange.req

    @property
    def _res(self) -> RawResponse:
        return self._exchange.res

    # Parameters and attributes

    def get_request_parameter(self, name: str) -> str | None:
        return self._req.get_parameter(name)

    def get_request_parameters(self) -> dict[str, list[str]]:
        raw = self._req.get_parameter_map() or {}
        return {name: list(values) for name, values in raw.items()}

    def get_request_attribute(self, name: str) -> Any | None:
        return self._req.get_attribute(name)

    def set_request_attribute(self, name: str, value: Any) -> None:
        self._req.set_attribute(name, value)

    # Headers

    def get_request_header(self, name: str | None) -> str | None:
        """Case-insensitive request header lookup."""
        matched = resolve_header_name(self._req.get_header_names(), name)
        if matched is None:
            return None
        return self._req.get_header(matched)

    def set_response_header(self, name: str, value: str) -> None:
        self._res.set_header(name, value)

    def get_response_header(self, name: str) -> str | None:
        return self._res.get_header(name)

    def set_response_content_type(self, content: str) -> None:
        self._res.set_content_type(content)

    # Request metadata

    def get_request_method(self) -> str:
        return self._req.get_method()

    def get_remote_addr(self) -> str:
        return self._req.get_remote_addr()

    def get_server_name(self) -> str:
        return self._req.get_server_name()

    def get_server_port(self) -> int:
        return self._req.get_server_port()

    def get_scheme(self) -> str:
        return self._req.get_scheme()

    def get_protocol(self) -> str:
        return self._req.get_protocol()

    def is_secure(self) -> bool:
        return self._req.is_secure()

    # URL and path

    def get_request_url(self) -> str:
        """Absolute request URL without the query string."""
        url = str(self._req.get_request_url())
        idx = url.find("?")
        return url[:idx] if idx != -1 else url

    def get_full_request_url(self) -> str:
        url = str(self._req.get_request_url())
        query = self._req.get_query_string()
        return url if query is None else f"{url}?{query}"

    def get_path(self) -> str:
        """
        Request path relative to the application root.

        A leading "//" loses one slash before the context path is stripped. A context path that
        is not a literal prefix raises ContextPathError, or returns the URI untouched under the
        "passthrough" policy.
        """
        full_path = self._req.get_request_uri()
        if full_path is None:
            return ""
        if full_path.startswith("//"):
            full_path = full_path[1:]

        context = self._req.get_context_path()
        if context is None:
            return full_path
        if not full_path.startswith(context):
            if self.settings.context_path_mismatch == "passthrough":
                logger.warning("Context path %r is not a prefix of %r; returning URI unchanged", context, full_path)
                return full_path
            raise ContextPathError(full_path, context)
        return full_path[len(context):]

    # Cookies

    def get_request_cookies(self) -> list[Cookie]:
        return [Cookie.from_morsel(morsel) for morsel in self._req.get_cookies() or ()]

    def add_response_cookie(self, cookie: Cookie) -> None:
        header = build_set_cookie_header(cookie, default_same_site=self.settings.default_same_site)
        self._res.add_header(SET_COOKIE_HEADER, header)

    # Body

    def get_request_content(self) -> str:
        """
        Request body as one string, read once and cached.

        Lines are concatenated with their terminators dropped.
        """
        if self._body is None:
            try:
                self._body = "".join(line.rstrip("\r\n") for line in self._req.get_reader())
            except Exception as exc:  # noqa: BLE001
                raise TechnicalError(exc) from exc
            logger.debug("Read request body (%d chars)", len(self._body))
        return self._body


__all__ = ["SET_COOKIE_HEADER", "WebContext"]
