# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from finmate.auth.passwords import hash_password
from finmate.core.models import Category, Identity
from finmate.errors import ConflictError
from finmate.infra.spending_repo import SpendingRepository
from finmate.infra.user_repo import UserRepository

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password"
DEMO_RECORDS = 60
DEMO_DAYS_BACK = 90


def seed_demo_data(
    users: UserRepository,
    spendings: SpendingRepository,
    *,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Optional[Identity]:
    """Create the demo account with sample spendings unless it already exists.

    Returns the new identity, or None when nothing was seeded.
    """
    if users.exists_by_username(DEMO_USERNAME):
        return None

    rng = rng or random.Random()
    today = today or date.today()
    try:
        demo = users.register(DEMO_USERNAME, DEMO_EMAIL, hash_password(DEMO_PASSWORD))
    except ConflictError:
        return None
    categories = list(Category)

    for i in range(DEMO_RECORDS):
        amount = Decimal(str(rng.random() * 100 + 5)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        spendings.add(
            owner_id=demo.id,
            amount=amount,
            description=f"Sample Expense {i + 1}",
            spent_on=today - timedelta(days=rng.randrange(DEMO_DAYS_BACK)),
            category=rng.choice(categories),
        )

    logger.info("Seeded demo account '%s' with %d spendings", DEMO_USERNAME, DEMO_RECORDS)
    return demo
