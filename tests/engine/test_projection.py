import logging
from datetime import date
from decimal import Decimal

import pytest

from loan_tracker.engine.projection import (
    MAX_PROJECTION_MONTHS,
    extra_payment_impact,
    months_remaining,
    payoff_date,
    progress_percentage,
)


class TestPayoffDate:
    def test_future_date(self):
        as_of = date(2025, 1, 1)
        result = payoff_date(Decimal("10000"), Decimal("500"), Decimal("0.06"), as_of)
        # n = -ln(1 - 0.005 * 10000 / 500) / ln(1.005) = 21.1 -> 22 months
        assert result == date(2026, 11, 1)

    def test_zero_balance_returns_as_of(self):
        as_of = date(2025, 1, 1)
        assert payoff_date(Decimal("0"), Decimal("500"), Decimal("0.06"), as_of) == as_of

    def test_zero_rate(self):
        result = payoff_date(Decimal("1200"), Decimal("100"), Decimal("0"), date(2025, 1, 1))
        assert result == date(2026, 1, 1)

    def test_non_amortizing_payment_caps_at_horizon(self, caplog):
        with caplog.at_level(logging.WARNING, logger="loan_tracker.engine.projection"):
            result = payoff_date(Decimal("10000"), Decimal("10"), Decimal("0.06"), date(2025, 1, 1))
        assert MAX_PROJECTION_MONTHS == 1200
        assert result == date(2125, 1, 1)
        assert "does not amortize" in caplog.text

    def test_scheduled_payment_finishes_near_term(self):
        result = payoff_date(Decimal("10000"), Decimal("860.66"), Decimal("0.06"), date(2025, 1, 1))
        assert result in (date(2026, 1, 1), date(2026, 2, 1))


class TestExtraPaymentImpact:
    def test_extra_payment_saves(self):
        impact = extra_payment_impact(Decimal("200000"), Decimal("0.05"), 360, Decimal("200"))
        assert impact.months_saved > 0
        assert impact.interest_saved > 0
        assert impact.new_payoff_months < 360
        assert impact.months_saved + impact.new_payoff_months == 360

    def test_no_extra_payment(self):
        impact = extra_payment_impact(Decimal("100000"), Decimal("0.05"), 360, Decimal("0"))
        assert impact.months_saved == 0
        assert abs(impact.interest_saved) < Decimal("5")
        assert impact.new_payoff_months == 360

    def test_huge_extra_pays_off_first_month(self):
        impact = extra_payment_impact(Decimal("10000"), Decimal("0.06"), 12, Decimal("20000"))
        assert impact.new_payoff_months == 1
        assert impact.months_saved == 11

    def test_interest_free(self):
        impact = extra_payment_impact(Decimal("12000"), Decimal("0"), 12, Decimal("1000"))
        assert impact.new_payoff_months == 6
        assert impact.interest_saved == Decimal("0.00")

    @pytest.mark.parametrize("extra", [Decimal("1"), Decimal("50"), Decimal("1000")])
    def test_never_longer_than_term(self, extra):
        impact = extra_payment_impact(Decimal("30000"), Decimal("0.06"), 60, extra)
        assert impact.months_saved >= 0
        assert impact.new_payoff_months <= 60


class TestProgress:
    def test_months_remaining(self):
        assert months_remaining(360, date(2025, 1, 15), date(2026, 1, 1)) == 348

    def test_months_remaining_after_term(self):
        assert months_remaining(12, date(2020, 1, 1), date(2025, 1, 1)) == 0

    def test_progress_percentage(self):
        assert progress_percentage(Decimal("10000"), Decimal("2500")) == 75
        assert progress_percentage(Decimal("10000"), Decimal("10000")) == 0
        assert progress_percentage(Decimal("10000"), Decimal("0")) == 100

    def test_progress_zero_principal(self):
        assert progress_percentage(Decimal("0"), Decimal("0")) == 100
