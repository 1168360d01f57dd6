# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from finmate.auth.tokens import TOKEN_TYPE, TokenIssuer
from finmate.core.models import Identity
from finmate.errors import AuthenticationError
from finmate.infra.user_repo import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Authenticated identity of one request, or nobody."""

    identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def require_identity(self) -> Identity:
        if self.identity is None:
            raise AuthenticationError()
        return self.identity


ANONYMOUS = SessionContext()


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return ""
    scheme, _, value = authorization.strip().partition(" ")
    if scheme.lower() != TOKEN_TYPE.lower():
        return ""
    return value.strip()


def resolve_session(token: str, *, tokens: TokenIssuer, users: UserRepository) -> SessionContext:
    if not token:
        return ANONYMOUS
    try:
        subject = tokens.verify(token)
    except AuthenticationError as e:
        logger.debug("Token rejected: %s", e.message)
        return ANONYMOUS
    identity = users.find_by_username(subject)
    if identity is None:
        logger.debug("Token subject no longer resolves to an account")
        return ANONYMOUS
    return SessionContext(identity=identity)
