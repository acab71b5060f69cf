"""Loan enrichment - derive due amounts for stored loan records"""

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping

from loan_ledger.domain.accrual import MINIMUM_INTEREST_DAYS, apply_minimum_interest, simulate_ledger
from loan_ledger.domain.events import normalize_events, total_received
from loan_ledger.domain.models import BatchResult, EnrichmentOutcome, LoanTerms, OutcomeStatus

logger = logging.getLogger(__name__)


def enrich_loan(
    record: Mapping[str, Any],
    as_of: datetime,
    minimum_interest_days: int = MINIMUM_INTEREST_DAYS,
) -> EnrichmentOutcome:
    """
    Add amountReceived, remainingPrincipal and dueAmount to one loan record.

    Stored fields are copied, never modified. If the record cannot be
    simulated, the outcome is a fallback where remainingPrincipal and
    dueAmount both equal the stored amountGiven.
    """
    try:
        terms = LoanTerms.from_record(record)
        events = normalize_events(record.get("partialRepayments"))
        state = simulate_ledger(terms, events, as_of)
        apply_minimum_interest(state, terms, as_of, minimum_interest_days)

        return EnrichmentOutcome(
            status=OutcomeStatus.COMPUTED,
            record={
                **record,
                "amountReceived": total_received(events),
                "remainingPrincipal": state.principal,
                "dueAmount": state.due_amount,
            },
        )

    except Exception as e:
        logger.warning(
            f"Loan enrichment fell back to stored amount: {e}",
            extra={"loan_id": record.get("loanId"), "step": "loan_enrichment"},
        )
        return EnrichmentOutcome(
            status=OutcomeStatus.FALLBACK,
            record={
                **record,
                "remainingPrincipal": record.get("amountGiven"),
                "dueAmount": record.get("amountGiven"),
            },
            error=str(e),
        )


def enrich_loans(
    records: Iterable[Mapping[str, Any]],
    as_of: datetime,
    minimum_interest_days: int = MINIMUM_INTEREST_DAYS,
) -> BatchResult:
    """
    Enrich a batch of loan records against a single as-of instant.

    Deleted records are skipped. Each record is independent: a failure in one
    never affects the others.
    """
    return BatchResult(
        outcomes=[
            enrich_loan(record, as_of, minimum_interest_days)
            for record in records
            if not record.get("isDeleted")
        ]
    )
