"""Deposit balance reconstruction from the transaction log"""

import logging
from decimal import Decimal
from typing import Any, Iterable, List, Mapping

from loan_ledger.domain.models import (
    BatchResult,
    DepositTransaction,
    EnrichmentOutcome,
    OutcomeStatus,
    TransactionKind,
)
from loan_ledger.utils.date_utils import EPOCH
from loan_ledger.utils.decimal_utils import ZERO

logger = logging.getLogger(__name__)


def reconstruct_balance(transactions: List[DepositTransaction]) -> Decimal:
    """
    Current balance of a deposit account.

    Requirements:
    - Order by effective date; undated transactions sort as the epoch (stable)
    - A recorded balanceAfter on the latest transaction is authoritative
    - Otherwise fold from zero: deposits add, withdrawals subtract, other kinds are ignored
    - Amounts are only read by the fold, so a bad amount cannot override a recorded balance

    Raises:
        InvalidAmountError: A folded transaction has a non-numeric amount
    """
    if not transactions:
        return ZERO

    ordered = sorted(transactions, key=lambda txn: txn.effective_at or EPOCH)

    last = ordered[-1]
    if last.balance_after is not None:
        return last.balance_after

    balance = ZERO
    for txn in ordered:
        if txn.kind == TransactionKind.DEPOSIT:
            balance += txn.amount_value
        elif txn.kind == TransactionKind.WITHDRAWAL:
            balance -= txn.amount_value
    return balance


def enrich_deposit(record: Mapping[str, Any]) -> EnrichmentOutcome:
    """Add currentBalance to one deposit record; any failure yields a zero balance"""
    try:
        raw_transactions = record.get("transactions")
        transactions = (
            [DepositTransaction.from_record(raw) for raw in raw_transactions]
            if isinstance(raw_transactions, list)
            else []
        )
        return EnrichmentOutcome(
            status=OutcomeStatus.COMPUTED,
            record={**record, "currentBalance": reconstruct_balance(transactions)},
        )

    except Exception as e:
        logger.warning(
            f"Deposit balance fell back to zero: {e}",
            extra={"deposit_id": record.get("depositId"), "step": "deposit_enrichment"},
        )
        return EnrichmentOutcome(
            status=OutcomeStatus.FALLBACK,
            record={**record, "currentBalance": ZERO},
            error=str(e),
        )


def enrich_deposits(records: Iterable[Mapping[str, Any]]) -> BatchResult:
    """Enrich a batch of deposit records, skipping deleted ones"""
    return BatchResult(
        outcomes=[enrich_deposit(record) for record in records if not record.get("isDeleted")]
    )
