"""Loan calculator CLI. Runs the engine directly, no database.

Usage:
    python -m loan_tracker.cli 200000 0.05 360 --start 2025-01-15
    python -m loan_tracker.cli 200000 0.05 360 --extra 200
    python -m loan_tracker.cli 30000 0.06 60 --schedule
"""

import argparse
from datetime import date
from decimal import Decimal

from loan_tracker.engine.amortization import amortization_schedule, monthly_payment, total_interest
from loan_tracker.engine.calendar import add_months
from loan_tracker.engine.projection import extra_payment_impact


def _dollar(v) -> str:
    return f"${v:,.2f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


def print_summary(principal: Decimal, rate: Decimal, term: int, start: date) -> None:
    pmt = monthly_payment(principal, rate, term)
    _header("Loan Summary")
    print(f"  Principal:        {_dollar(principal)}")
    print(f"  Rate:             {rate * 100:.3f}% APR")
    print(f"  Term:             {term} months")
    print(f"  Monthly Payment:  {_dollar(pmt)}")
    print(f"  Total Interest:   {_dollar(total_interest(principal, rate, term))}")
    print(f"  First Payment:    {add_months(start, 1).isoformat()}")
    print(f"  Final Payment:    {add_months(start, term).isoformat()}")


def print_extra(principal: Decimal, rate: Decimal, term: int, start: date, extra: Decimal) -> None:
    impact = extra_payment_impact(principal, rate, term, extra)
    _header(f"With {_dollar(extra)} Extra Per Month")
    print(f"  Paid Off In:      {impact.new_payoff_months} months")
    print(f"  Payoff Date:      {add_months(start, impact.new_payoff_months).isoformat()}")
    print(f"  Months Saved:     {impact.months_saved}")
    print(f"  Interest Saved:   {_dollar(impact.interest_saved)}")


def print_schedule(principal: Decimal, rate: Decimal, term: int, start: date) -> None:
    _header("Amortization Schedule")
    print(f"  {'#':>4}  {'Date':<10}  {'Payment':>12}  {'Principal':>12}  {'Interest':>12}  {'Balance':>14}")
    for e in amortization_schedule(principal, rate, term, start):
        print(
            f"  {e.payment_number:>4}  {e.payment_date.isoformat():<10}  {e.payment_amount:>12,.2f}"
            f"  {e.principal_paid:>12,.2f}  {e.interest_paid:>12,.2f}  {e.remaining_balance:>14,.2f}"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Fixed-payment loan calculator")
    parser.add_argument("principal", type=Decimal, help="Amount borrowed")
    parser.add_argument("rate", type=Decimal, help="Annual rate as a decimal (0.05 for 5%%)")
    parser.add_argument("term", type=int, help="Term in months")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="Start date (default: today)")
    parser.add_argument("--extra", type=Decimal, default=None, help="Extra amount paid every month")
    parser.add_argument("--schedule", action="store_true", help="Print the full schedule")

    args = parser.parse_args(argv)
    if not 0 <= args.rate <= 1:
        parser.error("rate must be a decimal between 0 and 1 (e.g. 0.05 for 5%)")
    if args.term < 1:
        parser.error("term must be at least 1 month")

    start = args.start or date.today()
    print_summary(args.principal, args.rate, args.term, start)
    if args.extra is not None:
        print_extra(args.principal, args.rate, args.term, start, args.extra)
    if args.schedule:
        print_schedule(args.principal, args.rate, args.term, start)
    print()


if __name__ == "__main__":
    main()
