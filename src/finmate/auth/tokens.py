# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Stateless bearer tokens.

A token is an itsdangerous ``URLSafeTimedSerializer`` dump of
``{"sub": username, "iat": issued_at, "exp": expires_at}`` signed with the
server secret. Verification needs only the token, the current time and the
secret: there is no server-side session table, so a token stays valid until
its expiry.
"""

from __future__ import annotations

import time
from typing import Optional

from itsdangerous import BadPayload, BadSignature, URLSafeTimedSerializer

from finmate.errors import BadTokenSignature, MalformedToken, TokenExpired

TOKEN_TYPE = "Bearer"


class TokenIssuer:
    def __init__(self, secret_key: str, *, ttl_seconds: int, salt: str) -> None:
        if not secret_key:
            raise RuntimeError("Missing token secret")
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self.ttl_seconds = int(ttl_seconds)

    def __repr__(self) -> str:
        return f"TokenIssuer(ttl_seconds={self.ttl_seconds})"

    def issue(self, subject: str, *, now: Optional[float] = None) -> str:
        issued_at = int(time.time() if now is None else now)
        payload = {"sub": subject, "iat": issued_at, "exp": issued_at + self.ttl_seconds}
        return self._serializer.dumps(payload)

    def verify(self, token: str, *, now: Optional[float] = None) -> str:
        """Return the token subject or raise a token error.

        The signature is checked before any claim is read; expiry is checked
        against the embedded ``exp`` (expired when ``now >= exp``).
        """
        if not isinstance(token, str) or token.count(".") < 2:
            raise MalformedToken()
        try:
            data = self._serializer.loads(token)
        except BadPayload:
            raise MalformedToken() from None
        except BadSignature:
            raise BadTokenSignature() from None

        if not isinstance(data, dict):
            raise MalformedToken()
        sub = data.get("sub")
        exp = data.get("exp")
        if not isinstance(sub, str) or not sub.strip():
            raise MalformedToken()
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise MalformedToken()

        current = time.time() if now is None else now
        if current >= exp:
            raise TokenExpired()
        return sub
