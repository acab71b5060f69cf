"""POST /v1/deposits/sync and GET /v1/deposits - deposit upload and balance read"""

import time
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from loan_ledger.api.v1.schemas import DepositSyncRequest, DepositsResponse, SyncResponse, json_numbers
from loan_ledger.api.dependencies import get_request_id
from loan_ledger.domain.deposits import enrich_deposits
from loan_ledger.infrastructure.database.session import get_db
from loan_ledger.infrastructure.database.repositories import DepositRepository, SyncLogRepository
from loan_ledger.infrastructure.observability.logging import log_enrichment_batch
from loan_ledger.infrastructure.observability.metrics import record_enrichment, record_sync
from loan_ledger.utils.date_utils import parse_date

router = APIRouter()


@router.post("/deposits/sync", response_model=SyncResponse)
def sync_deposits(
    request_body: DepositSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Upsert deposit accounts uploaded from a device"""
    request_id = get_request_id(request)

    try:
        deposit_repo = DepositRepository(db)
        created = updated = 0

        for deposit in request_body.deposits:
            if deposit_repo.upsert(request_body.user_id, deposit.model_dump()):
                created += 1
            else:
                updated += 1

        SyncLogRepository(db).record_sync(
            user_id=request_body.user_id,
            device_id=request_body.device_id,
            deposits_count=len(request_body.deposits),
        )
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Deposit sync error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_sync("deposit", created, updated)
    return SyncResponse(created=created, updated=updated, total=len(request_body.deposits))


@router.get("/deposits", response_model=DepositsResponse)
def get_deposits(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    last_sync: Optional[str] = Query(None, description="Only deposits updated after this instant"),
    db: Session = Depends(get_db),
):
    """
    Retrieve a user's deposit accounts with currentBalance.

    The latest recorded balanceAfter wins; otherwise the balance is refolded
    from the transaction log.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    updated_after = None
    if last_sync:
        updated_after = parse_date(last_sync)
        if updated_after is None:
            raise HTTPException(status_code=400, detail="Invalid last_sync timestamp")

    try:
        records = DepositRepository(db).list_active(user_id, updated_after)
    except Exception as e:
        logging.error(f"Get deposits error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    batch = enrich_deposits(records)

    duration_ms = (time.time() - start_time) * 1000
    record_enrichment("deposit", batch)
    log_enrichment_batch(request_id, user_id, "deposit", len(batch), batch.fallback_count, duration_ms)

    deposits = [json_numbers(record) for record in batch.records]
    return DepositsResponse(
        deposits=deposits,
        count=len(deposits),
        server_time=datetime.now(timezone.utc).isoformat(),
    )
