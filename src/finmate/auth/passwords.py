# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_PH = PasswordHasher()

# Verified against when the username is unknown, so both failure paths cost one argon2 check.
_DUMMY_HASH = _PH.hash("finmate-dummy-password")


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    """Check ``plain`` against ``hash_value``.

    Any non-empty hash costs one argon2 verification, empty passwords included.
    """
    if not hash_value:
        return False
    try:
        ok = _PH.verify(hash_value, plain or "")
    except (VerificationError, InvalidHashError):
        return False
    return ok and bool(plain)


def burn_verification(plain: str) -> None:
    """Spend the cost of one verification without any identity behind it."""
    verify_password(_DUMMY_HASH, plain)
