"""GET /v1/backup/full and POST /v1/backup/restore - raw record export and import"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from loan_ledger.api.v1.schemas import BackupResponse, RestoreRequest, RestoreResponse
from loan_ledger.api.dependencies import get_request_id
from loan_ledger.infrastructure.database.session import get_db
from loan_ledger.infrastructure.database.repositories import DepositRepository, LoanRepository
from loan_ledger.infrastructure.observability.metrics import restored_records_counter

router = APIRouter()


@router.get("/backup/full", response_model=BackupResponse)
def full_backup(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Export every non-deleted record for a user.

    Records are returned as stored; derived balances are not included since
    they are recomputed on every read.
    """
    loans = LoanRepository(db).list_active(user_id)
    deposits = DepositRepository(db).list_active(user_id)

    return BackupResponse(
        loans=loans,
        deposits=deposits,
        backup_date=datetime.now(timezone.utc).isoformat(),
        loans_count=len(loans),
        deposits_count=len(deposits),
    )


@router.post("/backup/restore", response_model=RestoreResponse)
def restore_backup(
    request_body: RestoreRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Upsert records from a backup, optionally wiping the user's records first"""
    request_id = get_request_id(request)
    loan_repo = LoanRepository(db)
    deposit_repo = DepositRepository(db)

    try:
        if request_body.clear_existing:
            loan_repo.delete_all(request_body.user_id)
            deposit_repo.delete_all(request_body.user_id)

        for loan in request_body.loans:
            loan_repo.upsert(request_body.user_id, loan.model_dump())
        for deposit in request_body.deposits:
            deposit_repo.upsert(request_body.user_id, deposit.model_dump())

        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Restore error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    restored_records_counter.labels(entity="loan").inc(len(request_body.loans))
    restored_records_counter.labels(entity="deposit").inc(len(request_body.deposits))
    logging.info(
        "Backup restored",
        extra={
            "request_id": request_id,
            "user_id": request_body.user_id,
            "loans_restored": len(request_body.loans),
            "deposits_restored": len(request_body.deposits),
        },
    )

    return RestoreResponse(
        loans_restored=len(request_body.loans),
        deposits_restored=len(request_body.deposits),
    )
