# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Raw exchange handle protocols.

These mirror the primitives a servlet-style container exposes for one request/response pair.
Anything implementing them can be wrapped by `WebContext`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from http.cookies import Morsel
from typing import Any, Protocol


class RawRequest(Protocol):
    """Request side of a raw exchange."""

    def get_parameter(self, name: str) -> str | None: ...

    def get_parameter_map(self) -> Mapping[str, Sequence[str]] | None: ...

    def get_attribute(self, name: str) -> Any: ...

    def set_attribute(self, name: str, value: Any) -> None: ...

    def get_header_names(self) -> Iterable[str] | None: ...

    def get_header(self, name: str) -> str | None: ...

    def get_method(self) -> str: ...

    def get_remote_addr(self) -> str: ...

    def get_server_name(self) -> str: ...

    def get_server_port(self) -> int: ...

    def get_scheme(self) -> str: ...

    def get_protocol(self) -> str: ...

    def is_secure(self) -> bool: ...

    def get_request_url(self) -> str:
        """Reconstructed scheme://host[:port]/path, without the query string."""
        ...

    def get_query_string(self) -> str | None: ...

    def get_request_uri(self) -> str | None: ...

    def get_context_path(self) -> str | None: ...

    def get_cookies(self) -> Sequence[Morsel] | None: ...

    def get_reader(self) -> Iterable[str]:
        """Text stream over the request body. Single-read."""
        ...


class RawResponse(Protocol):
    """Response side of a raw exchange."""

    def set_header(self, name: str, value: str) -> None: ...

    def add_header(self, name: str, value: str) -> None: ...

    def get_header(self, name: str) -> str | None: ...

    def set_content_type(self, content_type: str) -> None: ...


@dataclass(frozen=True)
class Exchange:
    """Non-owning pair of raw request/response for a single in-flight exchange."""

    req: RawRequest
    res: RawResponse


__all__ = ["Exchange", "RawRequest", "RawResponse"]
