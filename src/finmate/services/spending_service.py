# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Owner-scoped operations over spending records.

Every operation takes the caller's ``SessionContext`` explicitly and fails
with ``AuthenticationError`` when it carries no identity.
"""

from __future__ import annotations

import logging
from typing import Any, List

from finmate.auth.session import SessionContext
from finmate.core.models import SpendingRecord
from finmate.core.parsing import clean_description, parse_amount, parse_category, parse_date
from finmate.errors import NotFoundError
from finmate.infra.spending_repo import SpendingRepository
from finmate.permissions import authorize_owner

logger = logging.getLogger(__name__)


def add_spending(
    repo: SpendingRepository,
    session: SessionContext,
    *,
    amount: Any,
    description: Any,
    spent_on: Any,
    category: Any,
) -> SpendingRecord:
    owner = session.require_identity()
    rec = repo.add(
        owner_id=owner.id,
        amount=parse_amount(amount),
        description=clean_description(description),
        spent_on=parse_date(spent_on),
        category=parse_category(category),
    )
    logger.info("Spending %s added for user id=%s", rec.id, owner.id)
    return rec


def list_my_spendings(repo: SpendingRepository, session: SessionContext) -> List[SpendingRecord]:
    owner = session.require_identity()
    return repo.list_by_owner(owner.id)


def get_my_spending(repo: SpendingRepository, session: SessionContext, record_id: int) -> SpendingRecord:
    owner = session.require_identity()
    rec = repo.get(record_id)
    if rec is None:
        raise NotFoundError(f"Spending {record_id} not found")
    authorize_owner(rec, owner)
    return rec


def delete_spending(repo: SpendingRepository, session: SessionContext, record_id: int) -> None:
    """Delete one of the caller's records.

    Missing id -> ``NotFoundError``; someone else's record -> ``NotOwner``.
    """
    owner = session.require_identity()
    repo.delete(record_id, check=lambda rec: authorize_owner(rec, owner))
    logger.info("Spending %s deleted by user id=%s", record_id, owner.id)
