"""
Point balance store.

Balances are keyed by (user_id, program_id). Every mutation refreshes
last_updated so downstream explore results are recomputed.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.point_balance import PointBalanceRecord
from app.services.errors import ServiceError
from engine.catalog import Catalog
from engine.models import PointBalance

logger = logging.getLogger(__name__)


class BalanceService:
    def __init__(self, db: Session, catalog: Catalog):
        self.db = db
        self.catalog = catalog

    def _records(self, user_id: str) -> List[PointBalanceRecord]:
        return (
            self.db.query(PointBalanceRecord)
            .filter(PointBalanceRecord.user_id == user_id)
            .order_by(PointBalanceRecord.id)
            .all()
        )

    def _get_record(self, user_id: str, program_id: str) -> PointBalanceRecord:
        record = (
            self.db.query(PointBalanceRecord)
            .filter(
                PointBalanceRecord.user_id == user_id,
                PointBalanceRecord.program_id == program_id,
            )
            .first()
        )
        if record is None:
            raise ServiceError(
                404,
                "NOT_FOUND",
                f"No balance for program '{program_id}'.",
                {"program_id": program_id},
            )
        return record

    def _to_dict(self, record: PointBalanceRecord) -> Dict[str, Any]:
        program = self.catalog.get_program(record.program_id)
        return {
            "program_id": record.program_id,
            "program_name": program.name if program else None,
            "program_type": program.type if program else None,
            "balance": record.balance,
            "last_updated": record.last_updated,
        }

    def list_balances(self, user_id: str) -> List[Dict[str, Any]]:
        return [self._to_dict(r) for r in self._records(user_id)]

    def get_point_balances(self, user_id: str) -> List[PointBalance]:
        """Engine snapshot of the user's balances, in insertion order."""
        return [
            PointBalance(
                program_id=r.program_id,
                balance=r.balance,
                last_updated=r.last_updated.isoformat() if r.last_updated else "",
            )
            for r in self._records(user_id)
        ]

    def add_balance(self, user_id: str, program_id: str, balance: int) -> Dict[str, Any]:
        if self.catalog.get_program(program_id) is None:
            raise ServiceError(
                404,
                "NOT_FOUND",
                f"Unknown loyalty program '{program_id}'.",
                {"field": "program_id", "program_id": program_id},
            )

        record = PointBalanceRecord(
            user_id=user_id,
            program_id=program_id,
            balance=balance,
            last_updated=datetime.now(timezone.utc),
        )
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ServiceError(
                409,
                "CONFLICT",
                f"A balance for program '{program_id}' already exists.",
                {"field": "program_id", "program_id": program_id},
            )

        self.db.refresh(record)
        logger.info("Added %s balance for user %s", program_id, user_id)
        return self._to_dict(record)

    def update_balance(self, user_id: str, program_id: str, balance: int) -> Dict[str, Any]:
        record = self._get_record(user_id, program_id)
        record.balance = balance
        record.last_updated = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(record)
        logger.info("Updated %s balance for user %s", program_id, user_id)
        return self._to_dict(record)

    def remove_balance(self, user_id: str, program_id: str) -> None:
        record = self._get_record(user_id, program_id)
        self.db.delete(record)
        self.db.commit()
        logger.info("Removed %s balance for user %s", program_id, user_id)

    def total_points(self, user_id: str) -> int:
        return sum(r.balance for r in self._records(user_id))
