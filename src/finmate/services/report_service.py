# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tabular views over a caller's own spending records (pandas)."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List

import pandas as pd

from finmate.core.models import SpendingRecord

COLUMNS = ["id", "date", "category", "amount", "description"]


def spendings_frame(records: Iterable[SpendingRecord]) -> pd.DataFrame:
    rows = [
        {
            "id": r.id,
            "date": r.date.isoformat(),
            "category": r.category.value,
            "amount": r.amount,
            "description": r.description,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def export_frame(records: Iterable[SpendingRecord]) -> pd.DataFrame:
    """Frame for CSV export: amounts as 2-decimal strings, newest first."""
    df = spendings_frame(records)
    if df.empty:
        return df
    df["amount"] = df["amount"].map(lambda a: f"{a:.2f}")
    return df.sort_values(by=["date", "id"], ascending=[False, False])


def category_summary(records: Iterable[SpendingRecord]) -> Dict[str, Any]:
    """Totals per category, largest first, plus the overall total.

    Amounts are summed as ``Decimal`` so totals keep cent precision.
    """
    df = spendings_frame(records)
    if df.empty:
        return {"total": "0.00", "count": 0, "categories": []}

    grouped = (
        df.groupby("category")["amount"]
        .agg(total=lambda s: sum(s, Decimal("0")), count="count")
        .reset_index()
    )
    grouped = grouped.sort_values(by=["total", "category"], ascending=[False, True])

    categories: List[Dict[str, Any]] = [
        {"category": row["category"], "total": f"{row['total']:.2f}", "count": int(row["count"])}
        for _, row in grouped.iterrows()
    ]
    overall = sum(df["amount"], Decimal("0"))
    return {"total": f"{overall:.2f}", "count": int(len(df)), "categories": categories}
