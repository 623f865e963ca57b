# services/holding_repository.py
"""
Storage for holdings, keyed by owner and holding id.

The analytics never touch a repository; callers read a snapshot with
`holding_service.list_holdings` and pass it in.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.holding import HoldingRow
from schemas.holding import Holding


class HoldingRepository(ABC):
    @abstractmethod
    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]:
        ...

    @abstractmethod
    def list(self, owner_id: str) -> List[Holding]:
        """All holdings of an owner in insertion order."""

    @abstractmethod
    def put(self, owner_id: str, holding: Holding) -> Holding:
        """Insert or replace by id; replacing keeps the original position."""

    @abstractmethod
    def delete(self, owner_id: str, holding_id: str) -> bool:
        ...


class InMemoryHoldingRepository(HoldingRepository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_owner: Dict[str, Dict[str, Holding]] = {}

    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]:
        with self._lock:
            return self._by_owner.get(owner_id, {}).get(holding_id)

    def list(self, owner_id: str) -> List[Holding]:
        with self._lock:
            return list(self._by_owner.get(owner_id, {}).values())

    def put(self, owner_id: str, holding: Holding) -> Holding:
        with self._lock:
            self._by_owner.setdefault(owner_id, {})[holding.id] = holding
        return holding

    def delete(self, owner_id: str, holding_id: str) -> bool:
        with self._lock:
            return self._by_owner.get(owner_id, {}).pop(holding_id, None) is not None


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on DateTime(timezone=True); stored values are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_holding(row: HoldingRow) -> Holding:
    return Holding(
        id=row.id,
        name=row.name,
        category=row.category,
        quantity=row.quantity,
        buy_price=row.buy_price,
        current_price=row.current_price,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlHoldingRepository(HoldingRepository):
    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _row(self, owner_id: str, holding_id: str) -> Optional[HoldingRow]:
        return self.db.query(HoldingRow).filter_by(owner_id=owner_id, id=holding_id).first()

    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]:
        row = self._row(owner_id, holding_id)
        return _to_holding(row) if row else None

    def list(self, owner_id: str) -> List[Holding]:
        rows = (
            self.db.query(HoldingRow)
            .filter_by(owner_id=owner_id)
            .order_by(HoldingRow.seq.asc())
            .all()
        )
        return [_to_holding(r) for r in rows]

    def put(self, owner_id: str, holding: Holding) -> Holding:
        row = self._row(owner_id, holding.id)
        if row is None:
            row = HoldingRow(id=holding.id, owner_id=owner_id)
            self.db.add(row)

        row.name = holding.name
        row.category = holding.category.value
        row.quantity = holding.quantity
        row.buy_price = holding.buy_price
        row.current_price = holding.current_price
        row.created_at = holding.created_at
        row.updated_at = holding.updated_at

        self._commit()
        self.db.refresh(row)
        return _to_holding(row)

    def delete(self, owner_id: str, holding_id: str) -> bool:
        row = self._row(owner_id, holding_id)
        if not row:
            return False
        self.db.delete(row)
        self._commit()
        return True
