# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parsers for the spending fields accepted at the boundary.

Each parser either returns a typed value or raises a ``ValidationError``
subclass naming the offending field.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from finmate.core.models import Category
from finmate.core.utils import canon
from finmate.errors import InvalidAmount, InvalidCategory, InvalidDate

CENTS = Decimal("0.01")
MAX_DESCRIPTION_LENGTH = 255

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_amount(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidAmount()
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Amount '{value}' is not a number") from None
    if not amount.is_finite():
        raise InvalidAmount(f"Amount '{value}' is not a number")
    if amount < 0:
        raise InvalidAmount("Amount must not be negative")
    # "-0" is not negative but would keep its sign.
    amount = abs(amount)
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmount(f"Amount '{value}' is out of range") from None


def parse_category(value: Any) -> Category:
    if not isinstance(value, str):
        raise InvalidCategory()
    category = Category.lookup(canon(value))
    if category is None:
        allowed = ", ".join(c.value for c in Category)
        raise InvalidCategory(f"Unknown category '{value}'. Allowed: {allowed}")
    return category


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        raise InvalidDate()
    if isinstance(value, date):
        return value
    s = str(value or "").strip()
    if not _ISO_DATE.match(s):
        raise InvalidDate()
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"'{s}' is not a valid calendar date") from None


def clean_description(value: Any) -> str:
    return str(value or "").strip()[:MAX_DESCRIPTION_LENGTH]
