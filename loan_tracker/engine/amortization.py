"""Fixed-payment amortization.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from loan_tracker.engine.calendar import add_months
from loan_tracker.models.loan import AmortizationEntry, ScheduleSummary

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr (0.1 -> "0.1")
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """Calculate the fixed monthly payment for a fully amortizing loan."""
    principal = as_decimal(principal)
    annual_rate = as_decimal(annual_rate)
    if annual_rate == 0:
        return round_money(principal / term_months)

    r = annual_rate / 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** term_months
    payment = principal * (r * factor) / (factor - 1)
    return round_money(payment)


def amortization_schedule(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    start_date: date,
    payment: Decimal | None = None,
) -> list[AmortizationEntry]:
    """Generate the payment-by-payment schedule.

    Args:
        principal: Loan amount
        annual_rate: Annual interest rate (e.g. 0.06 for 6%)
        term_months: Number of scheduled payments
        start_date: Loan start; payment i is due i months later
        payment: Fixed payment to apply. Computed from the terms if omitted.

    The balance is carried unrounded between periods; only emitted values are
    rounded. Cent rounding of the payment leaves a small residual after the
    last period, which the final entry absorbs so the schedule ends at zero.
    The last entry's payment can therefore differ from the others by a few cents.
    """
    principal = as_decimal(principal)
    annual_rate = as_decimal(annual_rate)
    pmt = monthly_payment(principal, annual_rate, term_months) if payment is None else as_decimal(payment)
    r = annual_rate / 12

    entries: list[AmortizationEntry] = []
    balance = principal

    for number in range(1, term_months + 1):
        interest = balance * r
        principal_paid = pmt - interest
        balance = max(ZERO, balance - principal_paid)
        amount = pmt

        # Final payment adjustment
        if number == term_months and balance > 0:
            principal_paid += balance
            amount += balance
            balance = ZERO

        entries.append(AmortizationEntry(
            payment_number=number,
            payment_date=add_months(start_date, number),
            payment_amount=round_money(amount),
            principal_paid=round_money(principal_paid),
            interest_paid=round_money(interest),
            remaining_balance=round_money(balance),
        ))

    return entries


def total_interest(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """Interest over the original schedule, ignoring payments actually made."""
    pmt = monthly_payment(principal, annual_rate, term_months)
    return round_money(pmt * term_months - as_decimal(principal))


def remaining_balance(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    payments_made: int,
) -> Decimal:
    """Scheduled balance after `payments_made` on-time payments."""
    if payments_made <= 0:
        return as_decimal(principal)
    if payments_made >= term_months:
        return ZERO

    # Start date only affects reported dates, not balances
    schedule = amortization_schedule(principal, annual_rate, term_months, date.today())
    return schedule[payments_made - 1].remaining_balance


def schedule_summary(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    payment: Decimal | None = None,
) -> ScheduleSummary:
    principal = as_decimal(principal)
    pmt = monthly_payment(principal, annual_rate, term_months) if payment is None else as_decimal(payment)
    total_paid = pmt * term_months
    return ScheduleSummary(
        total_payments=term_months,
        total_paid=round_money(total_paid),
        total_interest=round_money(total_paid - principal),
        total_principal=round_money(principal),
    )
