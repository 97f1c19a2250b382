from datetime import date

from loan_tracker.engine.calendar import add_months, next_payment_date, payments_made


class TestAddMonths:
    def test_simple(self):
        assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)

    def test_crosses_year(self):
        assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)

    def test_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)

    def test_offsets_from_anchor_not_chained(self):
        # Jan 31 + 2 months is Mar 31, not (Feb 28 + 1 month)
        assert add_months(date(2025, 1, 31), 2) == date(2025, 3, 31)


class TestNextPaymentDate:
    def test_first_payment(self):
        assert next_payment_date(date(2025, 1, 1)) == date(2025, 2, 1)

    def test_after_payments(self):
        assert next_payment_date(date(2025, 1, 1), 11) == date(2026, 1, 1)

    def test_month_end(self):
        assert next_payment_date(date(2025, 1, 31), 0) == date(2025, 2, 28)


class TestPaymentsMade:
    def test_one_year(self):
        assert payments_made(date(2024, 1, 1), date(2025, 1, 1)) == 12

    def test_same_date(self):
        assert payments_made(date(2025, 1, 1), date(2025, 1, 1)) == 0

    def test_ignores_day_of_month(self):
        assert payments_made(date(2024, 1, 15), date(2024, 2, 10)) == 1
        assert payments_made(date(2024, 1, 1), date(2024, 1, 31)) == 0

    def test_before_start_clamps(self):
        assert payments_made(date(2025, 6, 1), date(2025, 1, 1)) == 0
