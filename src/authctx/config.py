# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for authctx."""

import codecs
import os
from dataclasses import dataclass

CONTEXT_PATH_MISMATCH_POLICIES = ("raise", "passthrough")
SAME_SITE_POLICIES = ("strict", "lax", "none")


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _choice_env(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    return value if value in choices else default


def _encoding_env(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    try:
        codecs.lookup(value)
    except LookupError:
        return default
    return value


@dataclass
class ContextSettings:
    """Web context defaults."""

    body_encoding: str = "utf-8"
    body_decode_errors: str = "replace"
    context_path_mismatch: str = "raise"
    parse_form_body: bool = True
    default_same_site: str = "lax"

    @classmethod
    def from_env(cls) -> "ContextSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            body_encoding=_encoding_env("AUTHCTX_BODY_ENCODING", cls.body_encoding),
            body_decode_errors=_choice_env(
                "AUTHCTX_BODY_DECODE_ERRORS", cls.body_decode_errors, ("strict", "replace", "ignore")
            ),
            context_path_mismatch=_choice_env(
                "AUTHCTX_CONTEXT_PATH_MISMATCH", cls.context_path_mismatch, CONTEXT_PATH_MISMATCH_POLICIES
            ),
            parse_form_body=_bool_env("AUTHCTX_PARSE_FORM_BODY", cls.parse_form_body),
            default_same_site=_choice_env("AUTHCTX_COOKIE_SAMESITE", cls.default_same_site, SAME_SITE_POLICIES),
        )


def load_context_settings() -> ContextSettings:
    """Load context settings from environment with sensible defaults."""
    return ContextSettings.from_env()
