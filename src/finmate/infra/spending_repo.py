# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional

from finmate.core.models import Category, SpendingRecord
from finmate.errors import NotFoundError
from finmate.infra.yaml_store import dump_yaml, load_yaml


def _record_to_row(rec: SpendingRecord) -> dict:
    return {
        "id": rec.id,
        "amount": f"{rec.amount:.2f}",
        "description": rec.description,
        "date": rec.date.isoformat(),
        "category": rec.category.value,
        "owner_id": rec.owner_id,
    }


def _row_to_record(row: dict) -> Optional[SpendingRecord]:
    try:
        return SpendingRecord(
            id=int(row["id"]),
            amount=Decimal(str(row["amount"])),
            description=str(row.get("description") or ""),
            date=date.fromisoformat(str(row["date"])),
            category=Category(str(row["category"])),
            owner_id=int(row["owner_id"]),
        )
    except (KeyError, TypeError, ValueError, ArithmeticError):
        return None


class SpendingRepository:
    """Keyed store of spending records with a per-owner index.

    Listing goes through the owner index, never through a scan of every
    record. Deletion takes a ``check`` callback that runs under the same lock
    as the removal.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._records: Dict[int, SpendingRecord] = {}
        self._by_owner: Dict[int, List[int]] = {}
        if path is not None:
            for row in load_yaml(path).get("spendings") or []:
                rec = _row_to_record(row) if isinstance(row, dict) else None
                if rec is not None:
                    self._index(rec)
        self._next_id = max(self._records, default=0) + 1

    def _index(self, rec: SpendingRecord) -> None:
        self._records[rec.id] = rec
        self._by_owner.setdefault(rec.owner_id, []).append(rec.id)

    def _unindex(self, rec: SpendingRecord) -> None:
        self._records.pop(rec.id, None)
        ids = self._by_owner.get(rec.owner_id, [])
        if rec.id in ids:
            ids.remove(rec.id)
        if not ids:
            self._by_owner.pop(rec.owner_id, None)

    def _save(self) -> None:
        if self._path is None:
            return
        rows = [_record_to_row(r) for r in self._records.values()]
        dump_yaml(self._path, {"version": 1, "spendings": rows})

    def add(
        self,
        *,
        owner_id: int,
        amount: Decimal,
        description: str,
        spent_on: date,
        category: Category,
    ) -> SpendingRecord:
        with self._lock:
            rec = SpendingRecord(
                id=self._next_id,
                amount=amount,
                description=description,
                date=spent_on,
                category=category,
                owner_id=owner_id,
            )
            self._index(rec)
            try:
                self._save()
            except Exception:
                self._unindex(rec)
                raise
            self._next_id += 1
            return rec

    def get(self, record_id: int) -> Optional[SpendingRecord]:
        return self._records.get(record_id)

    def list_by_owner(self, owner_id: int) -> List[SpendingRecord]:
        """Records of one owner in insertion order."""
        with self._lock:
            return [self._records[i] for i in self._by_owner.get(owner_id, [])]

    def delete(self, record_id: int, *, check: Callable[[SpendingRecord], None]) -> SpendingRecord:
        """Remove a record if ``check`` accepts it.

        ``check`` signals refusal by raising; the record is then left in place.
        """
        with self._lock:
            rec = self._records.get(record_id)
            if rec is None:
                raise NotFoundError(f"Spending {record_id} not found")
            check(rec)
            pos = self._by_owner[rec.owner_id].index(rec.id)
            self._unindex(rec)
            try:
                self._save()
            except Exception:
                self._records[rec.id] = rec
                self._by_owner.setdefault(rec.owner_id, []).insert(pos, rec.id)
                raise
            return rec
