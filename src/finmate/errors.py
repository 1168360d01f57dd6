# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to, so routes never translate
exceptions by hand: the app installs one handler for ``FinmateError``.
"""

from __future__ import annotations


class FinmateError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def public_message(self) -> str:
        """Message safe to return to the client."""
        return self.message


# --- 400 ---


class ValidationError(FinmateError):
    status_code = 400
    default_message = "Invalid input"


class InvalidAmount(ValidationError):
    default_message = "Amount must be a non-negative number"


class InvalidCategory(ValidationError):
    default_message = "Unknown category"


class InvalidDate(ValidationError):
    default_message = "Date must be YYYY-MM-DD"


class ConflictError(FinmateError):
    status_code = 400
    default_message = "Conflict"


class DuplicateUsername(ConflictError):
    default_message = "Username is already taken"


class DuplicateEmail(ConflictError):
    default_message = "Email is already in use"


# --- 401 ---


class AuthenticationError(FinmateError):
    status_code = 401
    default_message = "Unauthenticated"

    @property
    def public_message(self) -> str:
        # Subclasses describe what failed; the client only ever sees the family message.
        return AuthenticationError.default_message


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid username or password"

    @property
    def public_message(self) -> str:
        return InvalidCredentials.default_message


class MalformedToken(AuthenticationError):
    default_message = "Malformed token"


class BadTokenSignature(AuthenticationError):
    default_message = "Bad token signature"


class TokenExpired(AuthenticationError):
    default_message = "Token expired"


# --- 403 / 404 ---


class AuthorizationError(FinmateError):
    status_code = 403
    default_message = "Forbidden"


class NotOwner(AuthorizationError):
    default_message = "Not authorized to access this spending"


class NotFoundError(FinmateError):
    status_code = 404
    default_message = "Not found"
