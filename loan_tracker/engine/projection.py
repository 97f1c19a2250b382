"""Read-only projections: payoff date, extra-payment what-if, progress."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from loan_tracker.engine.amortization import (
    ZERO,
    as_decimal,
    monthly_payment,
    round_money,
    total_interest,
)
from loan_tracker.engine.calendar import add_months, payments_made
from loan_tracker.models.loan import ExtraPaymentImpact

logger = logging.getLogger(__name__)

MAX_PROJECTION_MONTHS = 1200  # 100 years


def payoff_date(
    remaining_balance: Decimal,
    payment: Decimal,
    annual_rate: Decimal,
    as_of: date,
) -> date:
    """Date the balance reaches zero paying `payment` every month from `as_of`.

    A payment that never covers the interest would loop forever, so the
    simulation stops after MAX_PROJECTION_MONTHS and returns that horizon.
    """
    balance = as_decimal(remaining_balance)
    if balance <= 0:
        return as_of

    payment = as_decimal(payment)
    r = as_decimal(annual_rate) / 12
    months = 0
    while balance > 0 and months < MAX_PROJECTION_MONTHS:
        balance -= payment - balance * r
        months += 1

    if balance > 0:
        logger.warning(
            "Payment %s does not amortize balance %s at rate %s; capping payoff at %d months",
            payment, remaining_balance, annual_rate, MAX_PROJECTION_MONTHS,
        )
    return add_months(as_of, months)


def extra_payment_impact(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    extra_payment: Decimal,
) -> ExtraPaymentImpact:
    """Time and interest saved had `extra_payment` been added to every payment
    since the first one."""
    standard = monthly_payment(principal, annual_rate, term_months)
    standard_interest = total_interest(principal, annual_rate, term_months)

    payment = standard + as_decimal(extra_payment)
    r = as_decimal(annual_rate) / 12
    balance = as_decimal(principal)
    months = 0
    interest_paid = ZERO

    while balance > 0 and months < term_months:
        interest = balance * r
        balance = max(ZERO, balance - (payment - interest))
        interest_paid += interest
        months += 1

    return ExtraPaymentImpact(
        months_saved=term_months - months,
        interest_saved=round_money(standard_interest - interest_paid),
        new_payoff_months=months,
    )


def months_remaining(term_months: int, start_date: date, as_of: date) -> int:
    return max(0, term_months - payments_made(start_date, as_of))


def progress_percentage(principal: Decimal, remaining_balance: Decimal) -> int:
    """Share of principal repaid, as a whole percent."""
    principal = as_decimal(principal)
    if principal == 0:
        return 100
    pct = (principal - as_decimal(remaining_balance)) / principal * 100
    return int(pct.quantize(Decimal("1"), ROUND_HALF_UP))
