# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deterministic, programmable raw handles for tests and embedders without a WSGI server."""

from __future__ import annotations

import io
from collections.abc import Iterable, Mapping, Sequence
from http.cookies import Morsel
from typing import Any

from .headers import header_value


class StubRequest:
    """
    RawRequest that reports exactly what it was configured with.

    `body` may be a string, or an exception instance raised when the reader is requested.
    `reader_calls` counts how many times the body stream was handed out.
    """

    def __init__(
        self,
        *,
        method: str = "GET",
        url: str = "http://localhost/",
        query_string: str | None = None,
        request_uri: str | None = "/",
        context_path: str | None = None,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        parameters: Mapping[str, Sequence[str]] | None = None,
        cookies: Sequence[Morsel] | None = None,
        body: str | BaseException = "",
        scheme: str = "http",
        server_name: str = "localhost",
        server_port: int = 80,
        protocol: str = "HTTP/1.1",
        secure: bool = False,
        remote_addr: str = "127.0.0.1",
    ):
        self.method = method
        self.url = url
        self.query_string = query_string
        self.request_uri = request_uri
        self.context_path = context_path
        items = headers.items() if isinstance(headers, Mapping) else (headers or [])
        self.headers: list[tuple[str, str]] = [(str(k), str(v)) for k, v in items]
        self.parameters = {key: list(values) for key, values in (parameters or {}).items()}
        self.cookies = cookies
        self.body = body
        self.scheme = scheme
        self.server_name = server_name
        self.server_port = server_port
        self.protocol = protocol
        self.secure = secure
        self.remote_addr = remote_addr
        self.attributes: dict[str, Any] = {}
        self.reader_calls = 0

    def get_parameter(self, name: str) -> str | None:
        values = self.parameters.get(name)
        return values[0] if values else None

    def get_parameter_map(self) -> dict[str, list[str]]:
        return self.parameters

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value

    def get_header_names(self) -> list[str]:
        return [key for key, _ in self.headers]

    def get_header(self, name: str) -> str | None:
        # Exact-name lookup, like a store that does not fold case.
        for key, value in self.headers:
            if key == name:
                return value
        return None

    def get_method(self) -> str:
        return self.method

    def get_remote_addr(self) -> str:
        return self.remote_addr

    def get_server_name(self) -> str:
        return self.server_name

    def get_server_port(self) -> int:
        return self.server_port

    def get_scheme(self) -> str:
        return self.scheme

    def get_protocol(self) -> str:
        return self.protocol

    def is_secure(self) -> bool:
        return self.secure

    def get_request_url(self) -> str:
        return self.url

    def get_query_string(self) -> str | None:
        return self.query_string

    def get_request_uri(self) -> str | None:
        return self.request_uri

    def get_context_path(self) -> str | None:
        return self.context_path

    def get_cookies(self) -> Sequence[Morsel] | None:
        return self.cookies

    def get_reader(self) -> io.StringIO:
        self.reader_calls += 1
        if isinstance(self.body, BaseException):
            raise self.body
        return io.StringIO(self.body, newline=None)


class StubResponse:
    """RawResponse recording header lines in order."""

    def __init__(self) -> None:
        self.headers: list[tuple[str, str]] = []

    def set_header(self, name: str, value: str) -> None:
        lower = name.lower()
        self.headers = [(key, val) for key, val in self.headers if key.lower() != lower]
        self.headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        return header_value(self.headers, name)

    def get_headers(self, name: str) -> list[str]:
        lower = name.lower()
        return [value for key, value in self.headers if key.lower() == lower]

    def set_content_type(self, content_type: str) -> None:
        self.set_header("Content-Type", content_type)


__all__ = ["StubRequest", "StubResponse"]
