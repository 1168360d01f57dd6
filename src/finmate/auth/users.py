# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from finmate.auth.passwords import burn_verification, hash_password, verify_password
from finmate.core.models import Identity
from finmate.errors import InvalidCredentials, ValidationError
from finmate.infra.user_repo import UserRepository

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 50


def register_user(users: UserRepository, *, username: str, email: str, password: str) -> Identity:
    u = (username or "").strip()
    e = (email or "").strip()
    if not u:
        raise ValidationError("Username is required")
    if len(u) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
    if not e or "@" not in e:
        raise ValidationError("A valid email is required")
    if not password:
        raise ValidationError("Password is required")

    # Hash outside the store lock; argon2 is deliberately slow.
    ident = users.register(u, e, hash_password(password))
    logger.info("Registered user '%s' (id=%s)", ident.username, ident.id)
    return ident


def authenticate(users: UserRepository, *, username: str, password: str) -> Identity:
    """Return the identity for valid credentials, else raise ``InvalidCredentials``.

    Unknown usernames still pay for one password verification and fail with
    the same error as a wrong password.
    """
    ident = users.find_by_username(username)
    if ident is None or not ident.password_hash:
        burn_verification(password)
        logger.info("Sign-in failed for '%s'", (username or "").strip())
        raise InvalidCredentials()
    if not verify_password(ident.password_hash, password):
        logger.info("Sign-in failed for '%s'", ident.username)
        raise InvalidCredentials()
    return ident
