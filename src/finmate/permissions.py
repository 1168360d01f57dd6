# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import Request

from finmate.auth.session import ANONYMOUS, SessionContext, bearer_token, resolve_session
from finmate.core.models import Identity, SpendingRecord
from finmate.errors import NotOwner


def load_session_from_request(request: Request) -> SessionContext:
    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        return ANONYMOUS
    return resolve_session(
        token,
        tokens=request.app.state.tokens,
        users=request.app.state.users,
    )


def current_session(request: Request) -> SessionContext:
    s = getattr(request.state, "session", None)
    if s is not None:
        return s
    return load_session_from_request(request)


def authorize_owner(record: SpendingRecord, identity: Identity) -> None:
    """Allow iff ``identity`` owns ``record``; otherwise raise ``NotOwner``."""
    if record.owner_id != identity.id:
        raise NotOwner()


def authenticated_session(request: Request) -> SessionContext:
    """Session dependency that rejects anonymous requests before the body is read."""
    session = current_session(request)
    session.require_identity()
    return session
