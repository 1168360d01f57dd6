# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

TRUTHY = {"1", "true", "yes", "y"}

DEFAULT_TOKEN_TTL_SECONDS = 86400  # 24 hours
DEFAULT_TOKEN_SALT = "finmate.token.v1"


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


def _optional_path(name: str) -> Optional[Path]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return Path(raw).resolve()


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and read-only afterwards."""

    secret_key: str = field(repr=False)
    token_salt: str = DEFAULT_TOKEN_SALT
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    users_path: Optional[Path] = None
    spendings_path: Optional[Path] = None
    seed_demo: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise RuntimeError("Missing FINMATE_SECRET_KEY (or SECRET_KEY) in environment")
        if self.token_ttl_seconds <= 0:
            raise RuntimeError("FINMATE_TOKEN_TTL must be a positive number of seconds")


def load_settings() -> Settings:
    secret = os.getenv("FINMATE_SECRET_KEY") or os.getenv("SECRET_KEY") or ""
    return Settings(
        secret_key=secret,
        token_salt=os.getenv("FINMATE_TOKEN_SALT", DEFAULT_TOKEN_SALT),
        token_ttl_seconds=int(os.getenv("FINMATE_TOKEN_TTL", str(DEFAULT_TOKEN_TTL_SECONDS))),
        users_path=_optional_path("FINMATE_USERS_PATH"),
        spendings_path=_optional_path("FINMATE_SPENDINGS_PATH"),
        seed_demo=env_flag("FINMATE_SEED_DEMO"),
        log_level=os.getenv("FINMATE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
