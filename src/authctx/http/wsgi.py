# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Raw exchange handle backed by a PEP 3333 WSGI environ."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterable, Mapping
from http.cookies import CookieError, Morsel
from typing import Any
from urllib.parse import quote, urlsplit

import httpx

from ..config import ContextSettings, load_context_settings
from .headers import environ_key_to_header_name, header_name_to_environ_key, is_header_environ_key

logger = logging.getLogger(__name__)

ATTRIBUTES_KEY = "authctx.attributes"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
HEADER_ENCODING = "latin-1"
_DEFAULT_PORTS = {"http": "80", "https": "443"}
_CGI_KEYS = {"CONTENT_TYPE", "CONTENT_LENGTH"}


def _is_absent(key: str, value: Any) -> bool:
    # CGI keys are set to "" by servers when the header was not sent; HTTP_* keys only exist when it was.
    return value is None or (key in _CGI_KEYS and value == "")


def _quote_environ(value: str) -> str:
    # PEP 3333 native strings carry the raw bytes decoded as latin-1.
    return quote(value.encode("latin-1"))


class WsgiRequest:
    """
    Servlet-style view over a WSGI environ.

    The body is buffered the first time something needs it (form parameters or the reader), so
    form parsing does not starve later body reads.
    """

    def __init__(self, environ: dict[str, Any], settings: ContextSettings | None = None):
        self.environ = environ
        self.settings = settings or load_context_settings()
        self._buffered_body: bytes | None = None

    # Parameters and attributes

    def get_parameter(self, name: str) -> str | None:
        values = self.get_parameter_map().get(name)
        return values[0] if values else None

    def get_parameter_map(self) -> dict[str, list[str]]:
        params: dict[str, list[str]] = {}
        for key, value in httpx.QueryParams(self.get_query_string() or "").multi_items():
            params.setdefault(key, []).append(value)
        if self._has_form_body():
            form = self._read_body().decode(self.settings.body_encoding, errors=self.settings.body_decode_errors)
            for key, value in httpx.QueryParams(form).multi_items():
                params.setdefault(key, []).append(value)
        return params

    def _attributes(self) -> dict[str, Any]:
        return self.environ.setdefault(ATTRIBUTES_KEY, {})

    def get_attribute(self, name: str) -> Any:
        return self._attributes().get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self._attributes()[name] = value

    # Headers

    def get_header_names(self) -> list[str]:
        return [
            environ_key_to_header_name(key)
            for key, value in self.environ.items()
            if is_header_environ_key(key) and not _is_absent(key, value)
        ]

    def get_header(self, name: str) -> str | None:
        key = header_name_to_environ_key(name)
        value = self.environ.get(key)
        return None if _is_absent(key, value) else str(value)

    # Request line and connection metadata

    def get_method(self) -> str:
        return self.environ.get("REQUEST_METHOD", "")

    def get_remote_addr(self) -> str:
        return self.environ.get("REMOTE_ADDR", "")

    def get_server_name(self) -> str:
        return self.environ.get("SERVER_NAME", "")

    def get_server_port(self) -> int:
        try:
            return int(self.environ.get("SERVER_PORT") or 0)
        except ValueError:
            return 0

    def get_scheme(self) -> str:
        return self.environ.get("wsgi.url_scheme", "http")

    def get_protocol(self) -> str:
        return self.environ.get("SERVER_PROTOCOL", "")

    def is_secure(self) -> bool:
        return self.get_scheme().lower() == "https"

    # URL reconstruction

    def _raw_uri(self) -> str | None:
        raw = self.environ.get("RAW_URI") or self.environ.get("REQUEST_URI")
        if not raw:
            return None
        raw = str(raw)
        # Absolute-form request targets (proxy requests) carry scheme and authority.
        if "://" in raw.split("?", 1)[0]:
            parts = urlsplit(raw)
            return parts.path + (f"?{parts.query}" if "?" in raw else "")
        return raw

    def get_request_uri(self) -> str | None:
        raw = self._raw_uri()
        if raw is not None:
            return raw.split("?", 1)[0]
        return _quote_environ(self.environ.get("SCRIPT_NAME", "")) + _quote_environ(self.environ.get("PATH_INFO", ""))

    def get_query_string(self) -> str | None:
        raw = self._raw_uri()
        if raw is not None and "?" in raw:
            return raw.split("?", 1)[1]
        return self.environ.get("QUERY_STRING") or None

    def get_context_path(self) -> str | None:
        script_name = self.environ.get("SCRIPT_NAME")
        return _quote_environ(script_name) if script_name else None

    def get_request_url(self) -> str:
        """Rebuild scheme://host[:port]/path as described in PEP 3333."""
        scheme = self.get_scheme()
        host = self.environ.get("HTTP_HOST")
        if not host:
            host = self.environ.get("SERVER_NAME", "")
            port = str(self.environ.get("SERVER_PORT", ""))
            if port and port != _DEFAULT_PORTS.get(scheme.lower()):
                host = f"{host}:{port}"
        return f"{scheme}://{host}{self.get_request_uri() or ''}"

    # Cookies and body

    def get_cookies(self) -> list[Morsel]:
        """
        Cookies from the Cookie header, in header order with duplicates kept.

        Values are taken verbatim. A pair whose name Morsel refuses (reserved attribute names
        such as "path" or "version", illegal characters) is skipped on its own.
        """
        raw = self.environ.get("HTTP_COOKIE")
        if not raw:
            return []
        cookies: list[Morsel] = []
        for part in str(raw).split(";"):
            trimmed = part.strip()
            if not trimmed or "=" not in trimmed:
                continue
            name, _, value = trimmed.partition("=")
            name = name.strip()
            value = value.strip()
            if not name:
                continue
            morsel: Morsel = Morsel()
            try:
                morsel.set(name, value, value)
            except CookieError as exc:
                logger.debug("Skipping request cookie %r: %s", name, exc)
                continue
            cookies.append(morsel)
        return cookies

    def get_reader(self) -> io.StringIO:
        text = self._read_body().decode(self.settings.body_encoding, errors=self.settings.body_decode_errors)
        # newline=None splits on \n, \r and \r\n alike.
        return io.StringIO(text, newline=None)

    def _content_length(self) -> int | None:
        try:
            length = int(self.environ.get("CONTENT_LENGTH") or "")
        except ValueError:
            return None
        return length if length >= 0 else None

    def _has_form_body(self) -> bool:
        if not self.settings.parse_form_body:
            return False
        content_type = str(self.environ.get("CONTENT_TYPE") or "")
        return content_type.split(";", 1)[0].strip().lower() == FORM_CONTENT_TYPE

    def _read_body(self) -> bytes:
        if self._buffered_body is None:
            stream = self.environ.get("wsgi.input")
            length = self._content_length()
            if stream is None:
                data = b""
            elif length is not None:
                data = stream.read(length)
            elif self.environ.get("wsgi.input_terminated"):
                data = stream.read()
            else:
                data = b""
            self._buffered_body = bytes(data or b"")
            logger.debug("Buffered %d request body bytes", len(self._buffered_body))
        return self._buffered_body


class WsgiResponse:
    """
    Response headers and status collected before `start_response` is called.

    Header values are stored as latin-1, like WSGI response headers; values outside latin-1
    raise UnicodeEncodeError.
    """

    def __init__(self, status: str = "200 OK", headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None):
        self.status = status
        self.headers = httpx.Headers(headers, encoding=HEADER_ENCODING)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def add_header(self, name: str, value: str) -> None:
        # httpx.Headers has no public append; rebuild keeping every existing line.
        self.headers = httpx.Headers([*self.headers.raw, (name, value)], encoding=HEADER_ENCODING)

    def get_header(self, name: str) -> str | None:
        values = self.headers.get_list(name)
        return values[0] if values else None

    def set_content_type(self, content_type: str) -> None:
        self.headers["Content-Type"] = content_type

    def wsgi_headers(self) -> list[tuple[str, str]]:
        return [(key.decode(HEADER_ENCODING), value.decode(HEADER_ENCODING)) for key, value in self.headers.raw]

    def start(self, start_response: Callable[..., Any], exc_info: Any = None) -> Any:
        if exc_info is not None:
            return start_response(self.status, self.wsgi_headers(), exc_info)
        return start_response(self.status, self.wsgi_headers())


__all__ = ["ATTRIBUTES_KEY", "WsgiRequest", "WsgiResponse"]
