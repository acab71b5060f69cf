"""GET /v1/stats - record counts and recent sync history"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from loan_ledger.api.v1.schemas import StatsResponse, SyncLogItem
from loan_ledger.config import settings
from loan_ledger.infrastructure.database.session import get_db
from loan_ledger.infrastructure.database.repositories import (
    DepositRepository,
    LoanRepository,
    SyncLogRepository,
    isoformat,
)

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Summarize a user's stored records.

    Returns:
        Active loan/deposit counts, last sync time and the most recent syncs
    """
    sync_repo = SyncLogRepository(db)
    recent = sync_repo.recent(user_id, limit=settings.recent_sync_limit)

    recent_syncs = [
        SyncLogItem(
            device_id=log.device_id,
            sync_type=log.sync_type,
            loans_count=log.loans_count,
            deposits_count=log.deposits_count,
            timestamp=isoformat(log.timestamp),
        )
        for log in recent
    ]

    return StatsResponse(
        user_id=user_id,
        loans_count=LoanRepository(db).count_active(user_id),
        deposits_count=DepositRepository(db).count_active(user_id),
        last_sync=isoformat(sync_repo.last_sync_at(user_id)),
        recent_syncs=recent_syncs,
    )
