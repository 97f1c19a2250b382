"""Calendar-month arithmetic shared by schedules, payments and projections.

Month overflow clamps to the last day of the target month:
Jan 31 + 1 month = Feb 28 (Feb 29 in leap years).
"""

from datetime import date

from dateutil.relativedelta import relativedelta


def add_months(day: date, months: int) -> date:
    return day + relativedelta(months=months)


def next_payment_date(start_date: date, payments_made: int = 0) -> date:
    """Due date of the payment following `payments_made` completed ones."""
    return add_months(start_date, payments_made + 1)


def payments_made(start_date: date, current_date: date) -> int:
    """Count month boundaries crossed between two dates.

    Day-of-month is ignored, so Jan 15 -> Feb 10 counts as one.
    """
    months = (current_date.year - start_date.year) * 12 + (current_date.month - start_date.month)
    return max(0, months)
