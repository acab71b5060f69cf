"""POST /v1/loans/sync and GET /v1/loans - loan upload and enriched read"""

import time
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from loan_ledger.api.v1.schemas import LoanSyncRequest, LoansResponse, SyncResponse, json_numbers
from loan_ledger.api.dependencies import get_as_of, get_request_id
from loan_ledger.config import settings
from loan_ledger.domain.enrichment import enrich_loans
from loan_ledger.domain.events import normalize_events, total_received
from loan_ledger.infrastructure.database.session import get_db
from loan_ledger.infrastructure.database.repositories import LoanRepository, SyncLogRepository
from loan_ledger.infrastructure.observability.logging import log_enrichment_batch
from loan_ledger.infrastructure.observability.metrics import record_enrichment, record_sync
from loan_ledger.utils.date_utils import parse_date

router = APIRouter()


@router.post("/loans/sync", response_model=SyncResponse)
def sync_loans(
    request_body: LoanSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Upsert loans uploaded from a device.

    amountReceived is recomputed from partialRepayments (top-ups excluded)
    rather than trusted from the device.
    """
    request_id = get_request_id(request)

    try:
        loan_repo = LoanRepository(db)
        created = updated = 0

        for loan in request_body.loans:
            payload = loan.model_dump()
            payload["amountReceived"] = float(total_received(normalize_events(payload["partialRepayments"])))

            if loan_repo.upsert(request_body.user_id, payload):
                created += 1
            else:
                updated += 1

        SyncLogRepository(db).record_sync(
            user_id=request_body.user_id,
            device_id=request_body.device_id,
            loans_count=len(request_body.loans),
        )
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Loan sync error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_sync("loan", created, updated)
    return SyncResponse(created=created, updated=updated, total=len(request_body.loans))


@router.get("/loans", response_model=LoansResponse)
def get_loans(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    last_sync: Optional[str] = Query(None, description="Only loans updated after this instant"),
    db: Session = Depends(get_db),
    as_of: datetime = Depends(get_as_of),
):
    """
    Retrieve a user's loans with derived balances.

    Each loan gains amountReceived, remainingPrincipal and dueAmount computed
    as of the request time. A loan that cannot be simulated is still returned,
    with both balances equal to amountGiven.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    updated_after = None
    if last_sync:
        updated_after = parse_date(last_sync)
        if updated_after is None:
            raise HTTPException(status_code=400, detail="Invalid last_sync timestamp")

    try:
        records = LoanRepository(db).list_active(user_id, updated_after)
    except Exception as e:
        logging.error(f"Get loans error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    batch = enrich_loans(records, as_of, settings.minimum_interest_days)

    duration_ms = (time.time() - start_time) * 1000
    record_enrichment("loan", batch)
    log_enrichment_batch(request_id, user_id, "loan", len(batch), batch.fallback_count, duration_ms)

    loans = [json_numbers(record) for record in batch.records]
    return LoansResponse(
        loans=loans,
        count=len(loans),
        server_time=datetime.now(timezone.utc).isoformat(),
    )
