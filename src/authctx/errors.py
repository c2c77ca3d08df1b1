# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    IO_ERROR = "IO_ERROR"
    DECODE_ERROR = "DECODE_ERROR"
    CONTEXT_PATH_MISMATCH = "CONTEXT_PATH_MISMATCH"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AuthContextError(Exception):
    """Base class for errors raised while normalizing an exchange."""

    category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR


class TechnicalError(AuthContextError):
    """
    Technical failure while talking to the raw exchange.

    Always raised with ``from`` so ``__cause__`` holds the original exception;
    ``cause`` mirrors it for callers that only look at attributes.
    """

    def __init__(self, cause: BaseException, message: str | None = None):
        self.cause = cause
        self.category = categorize_exception(cause)
        super().__init__(message or f"{error_category_to_reason(self.category)}: {cause}")


class ContextPathError(AuthContextError, ValueError):
    """Reported context path is not a prefix of the request URI."""

    category = ErrorCategory.CONTEXT_PATH_MISMATCH

    def __init__(self, uri: str, context_path: str):
        self.uri = uri
        self.context_path = context_path
        super().__init__(f"Context path {context_path!r} is not a prefix of request URI {uri!r}")


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python exceptions raised by raw handles to ErrorCategory.
    """
    if isinstance(exc, AuthContextError):
        return exc.category

    if isinstance(exc, UnicodeError):
        return ErrorCategory.DECODE_ERROR

    if isinstance(exc, (OSError, EOFError)):
        return ErrorCategory.IO_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.IO_ERROR: "I/O failure reading request",
        ErrorCategory.DECODE_ERROR: "Request body could not be decoded",
        ErrorCategory.CONTEXT_PATH_MISMATCH: "Context path does not match request URI",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected failure reading request",
        None: "",
    }
    return mapping.get(category, "Unexpected failure reading request")


__all__ = [
    "AuthContextError",
    "ContextPathError",
    "ErrorCategory",
    "TechnicalError",
    "categorize_exception",
    "error_category_to_reason",
]
