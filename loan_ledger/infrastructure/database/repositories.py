"""Data access layer for stored loan and deposit records"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type
from sqlalchemy.orm import Session
from loan_ledger.infrastructure.database.models import DepositRecord, LoanRecord, SyncLog, utcnow

# Fields owned by the store, never copied into the JSON payload
MANAGED_FIELDS = {"userId", "isDeleted", "createdAt", "updatedAt", "_id", "__v"}


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO string in UTC (SQLite hands back naive datetimes)"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class _RecordRepository:
    """Shared upsert/query logic for records keyed by (user_id, external id)"""

    model: Type[Any]
    id_field: str  # payload key carrying the device-side identifier
    id_column: str

    def __init__(self, db: Session):
        self.db = db

    def _find(self, user_id: str, external_id: str):
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .filter(getattr(self.model, self.id_column) == external_id)
            .first()
        )

    def upsert(self, user_id: str, payload: Dict[str, Any]) -> bool:
        """Insert or replace a record from a device payload. Returns True if created."""
        external_id = payload[self.id_field]
        data = {k: v for k, v in payload.items() if k not in MANAGED_FIELDS}
        is_deleted = bool(payload.get("isDeleted", False))

        existing = self._find(user_id, external_id)
        if existing is not None:
            existing.data = data
            existing.is_deleted = is_deleted
            existing.updated_at = utcnow()
            self.db.flush()
            return False

        self.db.add(
            self.model(
                user_id=user_id,
                data=data,
                is_deleted=is_deleted,
                **{self.id_column: external_id},
            )
        )
        self.db.flush()
        return True

    def list_active(self, user_id: str, updated_after: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Non-deleted records for a user, optionally only those changed after a sync point"""
        query = (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .filter(self.model.is_deleted.is_(False))
        )
        if updated_after is not None:
            query = query.filter(self.model.updated_at > updated_after)

        return [self.to_record(row) for row in query.order_by(self.model.created_at).all()]

    def count_active(self, user_id: str) -> int:
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .filter(self.model.is_deleted.is_(False))
            .count()
        )

    def delete_all(self, user_id: str) -> int:
        return self.db.query(self.model).filter(self.model.user_id == user_id).delete()

    def to_record(self, row) -> Dict[str, Any]:
        """Stored view handed to the enrichment layer"""
        return {
            **row.data,
            self.id_field: getattr(row, self.id_column),
            "isDeleted": row.is_deleted,
            "createdAt": isoformat(row.created_at),
            "updatedAt": isoformat(row.updated_at),
        }


class LoanRepository(_RecordRepository):
    """Repository for loan records"""

    model = LoanRecord
    id_field = "loanId"
    id_column = "loan_id"


class DepositRepository(_RecordRepository):
    """Repository for deposit records"""

    model = DepositRecord
    id_field = "depositId"
    id_column = "deposit_id"


class SyncLogRepository:
    """Repository for sync history"""

    def __init__(self, db: Session):
        self.db = db

    def record_sync(
        self,
        user_id: str,
        device_id: Optional[str],
        loans_count: int = 0,
        deposits_count: int = 0,
    ) -> SyncLog:
        log = SyncLog(
            user_id=user_id,
            device_id=device_id,
            sync_type="incremental",
            loans_count=loans_count,
            deposits_count=deposits_count,
        )
        self.db.add(log)
        self.db.flush()
        return log

    def recent(self, user_id: str, limit: int = 5) -> List[SyncLog]:
        """Most recent sync logs first"""
        return (
            self.db.query(SyncLog)
            .filter(SyncLog.user_id == user_id)
            .order_by(SyncLog.timestamp.desc())
            .limit(limit)
            .all()
        )

    def last_sync_at(self, user_id: str) -> Optional[datetime]:
        row = (
            self.db.query(SyncLog.timestamp)
            .filter(SyncLog.user_id == user_id)
            .order_by(SyncLog.timestamp.desc())
            .first()
        )
        return row[0] if row else None
