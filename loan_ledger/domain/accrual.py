"""Interest accrual engine - rebuilds a loan's balances from its repayment events"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from loan_ledger.domain.models import LoanLedgerState, LoanTerms, Payment, RepaymentEvent, TopUp
from loan_ledger.utils.date_utils import whole_days_between

DAYS_PER_YEAR = 365
MINIMUM_INTEREST_DAYS = 30


def daily_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual percentage rate to a simple daily rate (365-day year)"""
    return annual_rate_percent / DAYS_PER_YEAR / 100


def _accrue(state: LoanLedgerState, until: datetime, rate: Decimal) -> None:
    """Add simple interest on current principal for the whole days up to `until`"""
    days = whole_days_between(state.last_date, until)
    if days > 0 and state.principal > 0:
        state.accrued += state.principal * rate * days


def _apply_payment(state: LoanLedgerState, payment: Payment) -> None:
    """Allocate a payment: accrued interest first, then principal, remainder is over-payment"""
    remaining = payment.amount

    interest_portion = min(remaining, state.accrued)
    state.accrued -= interest_portion
    state.interest_paid += interest_portion
    remaining -= interest_portion

    if remaining > 0:
        principal_portion = min(remaining, state.principal)
        state.principal -= principal_portion
        remaining -= principal_portion

    if remaining > 0:
        state.extra_interest_paid += remaining


def _apply_top_up(state: LoanLedgerState, top_up: TopUp) -> None:
    state.principal += top_up.amount


def simulate_ledger(
    terms: LoanTerms,
    events: Iterable[RepaymentEvent],
    as_of: datetime,
) -> LoanLedgerState:
    """
    Walk normalized events and return the loan's balances as of `as_of`.

    Requirements:
    - Simple, non-compounding daily interest on outstanding principal
    - Only whole elapsed days accrue; elapsed time is clamped at zero
    - Payments clear accrued interest before principal
    - Top-ups raise principal and allocate nothing
    - A tail segment accrues from the last event to `as_of`

    Args:
        terms: Origination terms
        events: Output of normalize_events (already ordered)
        as_of: Instant at which balances are evaluated

    Example:
        10000 at 12% with 500 paid on day 40
        accrued at day 40 = 10000 * 0.12 / 365 * 40 = 131.51
        → interest_paid 131.51, principal 9631.51
    """
    rate = daily_rate(terms.interest_rate)
    state = LoanLedgerState(principal=terms.amount_given, last_date=terms.origination)

    for event in events:
        _accrue(state, event.date, rate)

        if isinstance(event, TopUp):
            _apply_top_up(state, event)
        else:
            _apply_payment(state, event)

        state.last_date = event.date

    _accrue(state, as_of, rate)
    return state


def apply_minimum_interest(
    state: LoanLedgerState,
    terms: LoanTerms,
    as_of: datetime,
    minimum_days: int = MINIMUM_INTEREST_DAYS,
) -> LoanLedgerState:
    """
    Enforce the minimum interest charge for loans younger than `minimum_days`.

    Interest recognized so far (paid, over-paid and still accrued) is topped up
    to amount_given * daily_rate * minimum_days by raising accrued interest.
    Evaluated once, after the full event walk.
    """
    days_since_start = whole_days_between(terms.origination, as_of)
    if days_since_start >= minimum_days:
        return state

    min_interest = terms.amount_given * daily_rate(terms.interest_rate) * minimum_days
    paid_so_far = state.interest_paid + state.extra_interest_paid + state.accrued
    if min_interest > paid_so_far:
        state.accrued += min_interest - paid_so_far

    return state
