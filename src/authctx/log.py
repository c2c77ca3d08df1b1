# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for authctx.

The package logs under the "authctx" namespace and never touches the root logger, so the
embedding server keeps control of its own logging setup.
"""

from __future__ import annotations

import logging
import os

LOGGER_NAME = "authctx"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = os.getenv("AUTHCTX_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None, handler: logging.Handler | None = None) -> logging.Logger:
    """
    Set the level of the authctx loggers and attach one handler to them.

    Repeated calls adjust the level and reuse the handler added by the first call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, effective_level, logging.WARNING))

    owned = [h for h in logger.handlers if getattr(h, "_authctx_owned", False)]
    if handler is not None:
        for existing in owned:
            logger.removeHandler(existing)
        owned = []
    if not owned:
        handler = handler or logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._authctx_owned = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
