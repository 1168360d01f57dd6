# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class Category(str, Enum):
    FOOD = "FOOD"
    TRANSPORT = "TRANSPORT"
    UTILITIES = "UTILITIES"
    ENTERTAINMENT = "ENTERTAINMENT"
    HEALTH = "HEALTH"
    OTHER = "OTHER"

    @classmethod
    def lookup(cls, name: str) -> Optional["Category"]:
        """Return the member named ``name`` (exact), or None."""
        return cls.__members__.get(name)


@dataclass(frozen=True)
class Identity:
    id: int
    username: str
    email: str
    password_hash: str = field(repr=False)

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(frozen=True)
class SpendingRecord:
    id: int
    amount: Decimal
    description: str
    date: date
    category: Category
    owner_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": f"{self.amount:.2f}",
            "description": self.description,
            "date": self.date.isoformat(),
            "category": self.category.value,
            "owner": self.owner_id,
        }
