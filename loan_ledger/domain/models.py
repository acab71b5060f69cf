"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from loan_ledger.domain.exceptions import InvalidAmountError, InvalidLoanRecordError
from loan_ledger.utils.date_utils import parse_date
from loan_ledger.utils.decimal_utils import ZERO, is_number, to_decimal


@dataclass(frozen=True)
class LoanTerms:
    """Origination terms of a loan, read from its stored record"""

    amount_given: Decimal
    origination: datetime
    interest_rate: Decimal  # annual, percent

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "LoanTerms":
        """
        Build terms from a stored loan record.

        Raises:
            InvalidLoanRecordError: Missing origination date, non-numeric or
                negative amount/rate
        """
        origination = parse_date(record.get("date"))
        if origination is None:
            raise InvalidLoanRecordError(f"Unparseable origination date: {record.get('date')!r}")

        try:
            amount_given = to_decimal(record.get("amountGiven"))
            interest_rate = to_decimal(record.get("interestRate"))
        except InvalidAmountError as e:
            raise InvalidLoanRecordError(str(e)) from e

        if amount_given < 0:
            raise InvalidLoanRecordError(f"Negative amountGiven: {amount_given}")
        if interest_rate < 0:
            raise InvalidLoanRecordError(f"Negative interestRate: {interest_rate}")

        return cls(amount_given=amount_given, origination=origination, interest_rate=interest_rate)


@dataclass(frozen=True)
class Payment:
    """Repayment event: clears accrued interest, then principal"""

    amount: Decimal
    date: datetime


@dataclass(frozen=True)
class TopUp:
    """Additional disbursement: increases principal"""

    amount: Decimal
    date: datetime


RepaymentEvent = Union[Payment, TopUp]


@dataclass
class LoanLedgerState:
    """Running balances for a single simulation run"""

    principal: Decimal
    last_date: datetime
    accrued: Decimal = ZERO
    interest_paid: Decimal = ZERO
    extra_interest_paid: Decimal = ZERO

    @property
    def due_amount(self) -> Decimal:
        return self.principal + self.accrued


class TransactionKind(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


@dataclass(frozen=True)
class DepositTransaction:
    """Entry in a deposit account's transaction log"""

    kind: str  # "Deposit", "Withdrawal", anything else is ignored by the fold
    amount: Any  # stored value, converted only when the balance is folded
    effective_at: Optional[datetime]
    balance_after: Optional[Decimal]

    @property
    def amount_value(self) -> Decimal:
        """Amount as a Decimal; raises InvalidAmountError if not numeric"""
        return to_decimal(self.amount)

    @classmethod
    def from_record(cls, raw: Mapping[str, Any]) -> "DepositTransaction":
        balance_after = raw.get("balanceAfter")
        return cls(
            kind=raw.get("type"),
            amount=raw.get("amount"),
            effective_at=parse_date(raw.get("dateAD")),
            balance_after=to_decimal(balance_after) if is_number(balance_after) else None,
        )


class OutcomeStatus(str, Enum):
    COMPUTED = "computed"
    FALLBACK = "fallback"


@dataclass
class EnrichmentOutcome:
    """Result of enriching one stored record"""

    status: OutcomeStatus
    record: Dict[str, Any]
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.status is OutcomeStatus.FALLBACK


@dataclass
class BatchResult:
    """Outcomes for a batch of records, in input order"""

    outcomes: List[EnrichmentOutcome] = field(default_factory=list)

    @property
    def records(self) -> List[Dict[str, Any]]:
        return [outcome.record for outcome in self.outcomes]

    @property
    def fallback_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_fallback)

    def __len__(self) -> int:
        return len(self.outcomes)
