from dataclasses import dataclass
from decimal import Decimal

from loan_tracker.engine.portfolio import portfolio_stats
from loan_tracker.models.loan import LoanStatus, LoanType


@dataclass
class _Loan:
    loan_type: LoanType | str
    status: LoanStatus | str
    annual_rate: Decimal
    monthly_payment: Decimal
    remaining_balance: Decimal
    interest_paid: Decimal = Decimal("0")


def test_empty_portfolio():
    stats = portfolio_stats([])
    assert stats.total_loans == 0
    assert stats.total_debt == 0
    assert stats.average_interest_rate == 0
    assert stats.by_type == {}


def test_totals_and_breakdown():
    loans = [
        _Loan(LoanType.MORTGAGE, LoanStatus.ACTIVE, Decimal("0.05"), Decimal("1073.64"),
              Decimal("199759.69"), Decimal("833.33")),
        _Loan(LoanType.AUTO, LoanStatus.ACTIVE, Decimal("0.06"), Decimal("579.98"),
              Decimal("30000")),
        _Loan(LoanType.AUTO, LoanStatus.PAID_OFF, Decimal("0.04"), Decimal("300.00"),
              Decimal("0"), Decimal("512.40")),
    ]
    stats = portfolio_stats(loans)

    assert stats.total_loans == 3
    assert stats.active_loans == 2
    assert stats.total_debt == Decimal("229759.69")
    # Paid-off loans do not count toward the monthly outflow
    assert stats.total_monthly_payment == Decimal("1653.62")
    assert stats.total_interest_paid == Decimal("1345.73")
    assert stats.average_interest_rate == Decimal("5.00")

    auto = stats.by_type["auto"]
    assert auto.count == 2
    assert auto.total_debt == Decimal("30000.00")
    assert auto.monthly_payment == Decimal("579.98")
    assert stats.by_type["mortgage"].count == 1


def test_accepts_stored_string_values():
    loans = [_Loan("student", "deferred", Decimal("0.045"), Decimal("250"), Decimal("12000"))]
    stats = portfolio_stats(loans)
    assert stats.active_loans == 0
    assert stats.total_monthly_payment == Decimal("0.00")
    assert stats.by_type["student"].total_debt == Decimal("12000.00")
    assert stats.average_interest_rate == Decimal("4.50")
