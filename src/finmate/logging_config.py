# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the server entrypoint.

Modules only call ``logging.getLogger(__name__)``; handlers are installed here,
once, by ``python -m finmate``. Request bodies, passwords and tokens are never
passed to a logger.
"""

from __future__ import annotations

import logging.config
from typing import Any, Dict


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    handler = {"handlers": ["default"], "level": level, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "class": "rich.logging.RichHandler",
                "formatter": "default",
                "level": "DEBUG",
                "rich_tracebacks": True,
                "show_time": True,
                "show_path": False,
                "log_time_format": "%Y-%m-%d %H:%M:%S",
            },
        },
        "loggers": {
            "uvicorn": dict(handler),
            "uvicorn.error": dict(handler),
            "uvicorn.access": dict(handler),
            "": dict(handler),
        },
    }


def configure_logging(level: str = "INFO") -> Dict[str, Any]:
    config = build_logging_config(level)
    logging.config.dictConfig(config)
    return config
