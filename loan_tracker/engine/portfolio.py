"""Aggregate statistics across a user's loans."""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Protocol

from loan_tracker.engine.amortization import ZERO, round_money
from loan_tracker.models.loan import LoanStatus, LoanTypeStats, PortfolioStats


class LoanLike(Protocol):
    loan_type: Enum | str
    status: Enum | str
    annual_rate: Decimal
    monthly_payment: Decimal
    remaining_balance: Decimal
    interest_paid: Decimal


def _key(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


def portfolio_stats(loans: Iterable[LoanLike]) -> PortfolioStats:
    """Totals and per-type breakdown.

    Monthly payment totals only count active loans; debt and interest count
    every loan.
    """
    loans = list(loans)
    if not loans:
        return PortfolioStats()

    stats = PortfolioStats(total_loans=len(loans))
    rate_sum = ZERO

    for loan in loans:
        active = _key(loan.status) == LoanStatus.ACTIVE.value
        by_type = stats.by_type.setdefault(_key(loan.loan_type), LoanTypeStats())
        by_type.count += 1
        by_type.total_debt += loan.remaining_balance
        stats.total_debt += loan.remaining_balance
        stats.total_interest_paid += loan.interest_paid
        rate_sum += loan.annual_rate
        if active:
            stats.active_loans += 1
            stats.total_monthly_payment += loan.monthly_payment
            by_type.monthly_payment += loan.monthly_payment

    stats.total_debt = round_money(stats.total_debt)
    stats.total_monthly_payment = round_money(stats.total_monthly_payment)
    stats.total_interest_paid = round_money(stats.total_interest_paid)
    # Stored as a fraction, reported as a percentage
    stats.average_interest_rate = (rate_sum / len(loans) * 100).quantize(
        Decimal("0.01"), ROUND_HALF_UP
    )
    for by_type in stats.by_type.values():
        by_type.total_debt = round_money(by_type.total_debt)
        by_type.monthly_payment = round_money(by_type.monthly_payment)
    return stats
