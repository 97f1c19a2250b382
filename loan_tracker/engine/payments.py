"""Loan state transitions: opening a loan, recording payments, editing terms.

Every function returns a new LoanState; inputs are never mutated.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from loan_tracker.engine.amortization import ZERO, as_decimal, monthly_payment, round_money
from loan_tracker.engine.calendar import add_months, next_payment_date
from loan_tracker.models.loan import LoanState, LoanStatus, LoanTerms, PaymentSplit


def split_payment(balance: Decimal, annual_rate: Decimal, amount: Decimal) -> PaymentSplit:
    """Split a payment into one month of interest and the principal remainder."""
    interest = as_decimal(balance) * as_decimal(annual_rate) / 12
    return PaymentSplit(interest=interest, principal=as_decimal(amount) - interest)


def open_loan(terms: LoanTerms) -> LoanState:
    return LoanState(
        annual_rate=as_decimal(terms.annual_rate),
        remaining_balance=as_decimal(terms.principal),
        monthly_payment=monthly_payment(terms.principal, terms.annual_rate, terms.term_months),
        next_payment_date=next_payment_date(terms.start_date),
    )


def record_payment(
    state: LoanState,
    payment_amount: Decimal,
    payment_date: date | None = None,
) -> LoanState:
    """Apply one real-world payment to a loan.

    Not idempotent: call exactly once per payment. The amount is not validated;
    a payment below the accrued interest makes the balance grow.
    """
    payment_amount = as_decimal(payment_amount)
    split = split_payment(state.remaining_balance, state.annual_rate, payment_amount)
    new_balance = round_money(max(ZERO, state.remaining_balance - split.principal))

    status = state.status
    next_due = state.next_payment_date
    if new_balance == 0:
        status = LoanStatus.PAID_OFF
    elif status is LoanStatus.ACTIVE:
        next_due = add_months(payment_date or date.today(), 1)

    return replace(
        state,
        remaining_balance=new_balance,
        total_paid=round_money(state.total_paid + payment_amount),
        interest_paid=round_money(state.interest_paid + split.interest),
        status=status,
        next_payment_date=next_due,
    )


def revise_terms(state: LoanState, previous: LoanTerms, revised: LoanTerms) -> LoanState:
    """Bring derived fields in line with edited terms.

    The payment is recomputed only when principal, rate or term changed, and
    the next due date is reset only when the start date moved. Balances and
    totals are left as recorded.
    """
    changes: dict = {}
    if (revised.principal, revised.annual_rate, revised.term_months) != (
        previous.principal, previous.annual_rate, previous.term_months
    ):
        changes["annual_rate"] = as_decimal(revised.annual_rate)
        changes["monthly_payment"] = monthly_payment(
            revised.principal, revised.annual_rate, revised.term_months
        )
    if revised.start_date != previous.start_date:
        changes["next_payment_date"] = next_payment_date(revised.start_date)
    return replace(state, **changes)
