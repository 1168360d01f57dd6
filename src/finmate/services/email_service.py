# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

CONFIRM_SUBJECT = "Confirm your email"
CONFIRM_BODY = "Please confirm your email."


class EmailService(Protocol):
    def send_simple_message(self, to: str, subject: str, body: str) -> None: ...


class LogEmailService:
    """Stand-in sender: logs the message instead of talking to an SMTP server."""

    def send_simple_message(self, to: str, subject: str, body: str) -> None:
        logger.info("Simulated email to=%s subject=%r (%d chars)", to, subject, len(body or ""))


def send_signup_confirmation(mailer: EmailService, to: str) -> None:
    """Fire-and-forget confirmation mail; failures are logged, never raised."""
    try:
        mailer.send_simple_message(to, CONFIRM_SUBJECT, CONFIRM_BODY)
    except Exception:
        logger.exception("Could not send confirmation email to %s", to)
