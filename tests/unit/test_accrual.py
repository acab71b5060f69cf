"""Unit tests for the interest accrual simulator and minimum interest floor"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from loan_ledger.domain.accrual import apply_minimum_interest, daily_rate, simulate_ledger
from loan_ledger.domain.models import LoanTerms, Payment, TopUp

ORIGIN = datetime(2024, 1, 1, tzinfo=timezone.utc)
RATE_12 = Decimal("12") / 365 / 100


def day(n: int) -> datetime:
    return ORIGIN + timedelta(days=n)


def terms(amount: str = "10000", rate: str = "12") -> LoanTerms:
    return LoanTerms(amount_given=Decimal(amount), origination=ORIGIN, interest_rate=Decimal(rate))


def run(loan: LoanTerms, events, as_of: datetime):
    state = simulate_ledger(loan, events, as_of)
    return apply_minimum_interest(state, loan, as_of)


def test_daily_rate():
    """Test annual percent is divided by 365 and 100"""
    assert daily_rate(Decimal("12")) == RATE_12
    assert daily_rate(Decimal("0")) == Decimal("0")


def test_no_events_accrues_simple_interest():
    """Test N >= 30 days with no events: due = P + P * r * N"""
    state = run(terms(), [], day(45))

    assert state.principal == Decimal("10000")
    assert state.accrued == Decimal("10000") * RATE_12 * 45
    assert state.due_amount == Decimal("10000") + Decimal("10000") * RATE_12 * 45


def test_no_events_under_thirty_days_applies_floor():
    """Test N < 30 days with no events: due = P + P * r * 30"""
    state = run(terms(), [], day(10))

    expected = Decimal("10000") + Decimal("10000") * RATE_12 * 30
    assert state.due_amount == pytest.approx(expected, abs=Decimal("1e-12"))


def test_partial_days_do_not_accrue():
    """Test only whole elapsed days count"""
    state = simulate_ledger(terms(), [], day(45) + timedelta(hours=23))

    assert state.accrued == Decimal("10000") * RATE_12 * 45


def test_top_up_increases_principal_only():
    """Test top-up adds to principal and leaves accrued interest untouched"""
    top_up = TopUp(amount=Decimal("2500"), date=day(40))
    state = simulate_ledger(terms(), [top_up], day(40))

    assert state.principal == Decimal("12500")
    assert state.accrued == Decimal("10000") * RATE_12 * 40
    assert state.interest_paid == Decimal("0")
    assert state.extra_interest_paid == Decimal("0")


def test_top_up_raises_later_accrual():
    """Test interest after a top-up runs on the larger principal"""
    events = [TopUp(amount=Decimal("2500"), date=day(40))]
    state = simulate_ledger(terms(), events, day(50))

    expected = Decimal("10000") * RATE_12 * 40 + Decimal("12500") * RATE_12 * 10
    assert state.accrued == expected


def test_payment_equal_to_accrued_clears_interest_only():
    """Test payment of exactly the accrued interest leaves principal unchanged"""
    accrued = Decimal("10000") * RATE_12 * 40
    state = simulate_ledger(terms(), [Payment(amount=accrued, date=day(40))], day(40))

    assert state.accrued == Decimal("0")
    assert state.principal == Decimal("10000")
    assert state.interest_paid == accrued
    assert state.extra_interest_paid == Decimal("0")


def test_over_payment_routes_remainder_to_extra():
    """Test payment above interest + principal zeroes both and keeps the excess"""
    accrued = Decimal("1000") * RATE_12 * 40
    payment = Payment(amount=Decimal("2000"), date=day(40))
    state = run(terms("1000"), [payment], day(70))

    assert state.principal == Decimal("0")
    assert state.accrued == Decimal("0")
    assert state.interest_paid == accrued
    assert state.extra_interest_paid == Decimal("2000") - accrued - Decimal("1000")
    assert state.due_amount == Decimal("0")  # no principal left to accrue on


def test_end_to_end_single_payment():
    """Test 10000 at 12%, 500 paid on day 40"""
    state = run(terms(), [Payment(amount=Decimal("500"), date=day(40))], day(40))

    # accrued at day 40 = 10000 * 0.12 / 365 * 40 ≈ 131.5068
    assert state.interest_paid == pytest.approx(Decimal("131.5068"), abs=Decimal("0.0001"))
    assert state.principal == pytest.approx(Decimal("9631.5068"), abs=Decimal("0.0001"))
    assert state.principal == Decimal("10000") - (Decimal("500") - state.interest_paid)
    assert state.accrued == Decimal("0")
    assert state.extra_interest_paid == Decimal("0")


def test_payment_then_tail_accrual():
    """Test accrual resumes on the reduced principal after a payment"""
    state = run(terms(), [Payment(amount=Decimal("500"), date=day(40))], day(50))

    assert state.accrued == state.principal * RATE_12 * 10


def test_multiple_payments_interest_first():
    """Test each payment clears interest accrued since the previous event"""
    events = [
        Payment(amount=Decimal("100"), date=day(30)),
        Payment(amount=Decimal("100"), date=day(60)),
    ]
    state = simulate_ledger(terms(), events, day(60))

    first_interest = Decimal("10000") * RATE_12 * 30
    principal_after_first = Decimal("10000") - (Decimal("100") - first_interest)
    second_interest = principal_after_first * RATE_12 * 30

    assert state.interest_paid == first_interest + second_interest
    assert state.principal == principal_after_first - (Decimal("100") - second_interest)


def test_small_payment_only_reduces_interest():
    """Test a payment below accrued interest never touches principal"""
    state = simulate_ledger(terms(), [Payment(amount=Decimal("50"), date=day(40))], day(40))

    assert state.principal == Decimal("10000")
    assert state.interest_paid == Decimal("50")
    assert state.accrued == Decimal("10000") * RATE_12 * 40 - Decimal("50")


def test_zero_principal_accrues_nothing():
    """Test a zero-amount loan never accrues interest"""
    state = simulate_ledger(terms("0"), [], day(100))

    assert state.accrued == Decimal("0")


def test_events_before_origination_do_not_accrue():
    """Test negative elapsed time is clamped at zero"""
    events = [Payment(amount=Decimal("0"), date=day(-10))]
    state = simulate_ledger(terms(), events, day(40))

    # last_date moves back to day -10, so the tail runs 50 days
    assert state.accrued == Decimal("10000") * RATE_12 * 50


def test_minimum_interest_counts_early_payoff():
    """Test loan settled on day 5 still owes the 30-day minimum"""
    # 36.5% is exactly 0.001 per day: 5 interest by day 5, 30 minimum
    payoff = Payment(amount=Decimal("1005"), date=day(5))
    state = run(terms("1000", "36.5"), [payoff], day(10))

    assert state.principal == Decimal("0")
    assert state.interest_paid == Decimal("5")
    assert state.due_amount == Decimal("25")


def test_minimum_interest_satisfied_by_over_payment():
    """Test over-payment counts toward the minimum interest"""
    payment = Payment(amount=Decimal("1100"), date=day(5))
    state = run(terms("1000"), [payment], day(10))

    assert state.due_amount == Decimal("0")


def test_minimum_interest_not_applied_after_thirty_days():
    """Test the floor only applies to loans younger than 30 days"""
    loan = terms()
    state = simulate_ledger(loan, [], day(30))
    before = state.accrued

    apply_minimum_interest(state, loan, day(30))

    assert state.accrued == before


def test_minimum_interest_custom_window():
    """Test the floor length is configurable"""
    loan = terms()
    state = apply_minimum_interest(simulate_ledger(loan, [], day(10)), loan, day(10), minimum_days=60)

    assert state.accrued == pytest.approx(Decimal("10000") * RATE_12 * 60, abs=Decimal("1e-12"))


def test_simulation_is_deterministic():
    """Test identical inputs and as-of give identical results"""
    events = [
        Payment(amount=Decimal("500"), date=day(40)),
        TopUp(amount=Decimal("1000"), date=day(55)),
        Payment(amount=Decimal("300.25"), date=day(70)),
    ]

    first = run(terms(), events, day(90))
    second = run(terms(), events, day(90))

    assert first == second
