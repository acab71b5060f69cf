"""Repayment event normalization - filter, classify and order raw events"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from loan_ledger.domain.exceptions import InvalidAmountError
from loan_ledger.domain.models import Payment, RepaymentEvent, TopUp
from loan_ledger.utils.date_utils import parse_date
from loan_ledger.utils.decimal_utils import ZERO, to_decimal

logger = logging.getLogger(__name__)


def _classify(raw: Any) -> Optional[RepaymentEvent]:
    """Turn one stored event into a Payment or TopUp, or None if it has no usable date"""
    if not isinstance(raw, Mapping):
        return None

    event_date = parse_date(raw.get("date"))
    if event_date is None:
        return None

    try:
        amount = to_decimal(raw.get("amount"))
    except InvalidAmountError as e:
        # Non-numeric amounts still bound an accrual segment, they just move no money
        logger.debug("Treating event amount as zero: %s", e)
        amount = ZERO

    if amount < 0:
        return TopUp(amount=-amount, date=event_date)
    return Payment(amount=amount, date=event_date)


def normalize_events(raw_events: Any) -> List[RepaymentEvent]:
    """
    Prepare a loan's stored partial repayments for simulation.

    Requirements:
    - Anything other than a list/tuple yields no events
    - Entries without a parseable date are dropped silently
    - Negative stored amounts become TopUp events, the rest Payment events
    - Ascending by date; stable, so same-day entries keep their stored order
    """
    if not isinstance(raw_events, (list, tuple)):
        return []

    events = [event for event in map(_classify, raw_events) if event is not None]
    return sorted(events, key=lambda event: event.date)


def total_received(events: Iterable[RepaymentEvent]) -> Decimal:
    """Sum of all payments (top-ups excluded)"""
    return sum((event.amount for event in events if isinstance(event, Payment)), ZERO)
