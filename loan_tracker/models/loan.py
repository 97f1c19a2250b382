from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class LoanType(Enum):
    MORTGAGE = "mortgage"
    AUTO = "auto"
    PERSONAL = "personal"
    STUDENT = "student"
    OTHER = "other"


class LoanStatus(Enum):
    ACTIVE = "active"
    PAID_OFF = "paid_off"
    DEFERRED = "deferred"
    DEFAULT = "default"


@dataclass(frozen=True)
class LoanTerms:
    principal: Decimal  # Original amount borrowed
    annual_rate: Decimal  # Nominal yearly rate, e.g. Decimal("0.05") for 5%
    term_months: int
    start_date: date  # Payment 1 is due one month after this


@dataclass(frozen=True)
class LoanState:
    """Mutable side of a loan. Updates produce a new instance."""
    annual_rate: Decimal
    remaining_balance: Decimal
    monthly_payment: Decimal
    next_payment_date: date
    total_paid: Decimal = Decimal("0")
    interest_paid: Decimal = Decimal("0")
    status: LoanStatus = LoanStatus.ACTIVE

    @property
    def is_paid_off(self) -> bool:
        return self.status is LoanStatus.PAID_OFF


@dataclass(frozen=True)
class AmortizationEntry:
    payment_number: int  # 1-based
    payment_date: date
    payment_amount: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal  # Balance after this payment


@dataclass(frozen=True)
class ScheduleSummary:
    total_payments: int
    total_paid: Decimal
    total_interest: Decimal
    total_principal: Decimal


@dataclass(frozen=True)
class PaymentSplit:
    """Interest/principal split of a single payment. Values are unrounded."""
    interest: Decimal
    principal: Decimal  # Negative when the payment does not cover interest


@dataclass(frozen=True)
class ExtraPaymentImpact:
    months_saved: int
    interest_saved: Decimal
    new_payoff_months: int


@dataclass
class LoanTypeStats:
    count: int = 0
    total_debt: Decimal = Decimal("0")
    monthly_payment: Decimal = Decimal("0")


@dataclass
class PortfolioStats:
    total_loans: int = 0
    active_loans: int = 0
    total_debt: Decimal = Decimal("0")
    total_monthly_payment: Decimal = Decimal("0")
    total_interest_paid: Decimal = Decimal("0")
    average_interest_rate: Decimal = Decimal("0")  # Percentage, e.g. 5.25
    by_type: dict[str, LoanTypeStats] = field(default_factory=dict)
