"""
Unit Tests for Confidence Scorer

Deductions are independent and cumulative within each band.
"""

from decimal import Decimal

import pytest

from deal_engine.calculators.confidence import ConfidenceScorer
from deal_engine.models import CreditTier

TIER = CreditTier(name="Tier A", min_score=700, max_ltv=Decimal("120"), max_rate=Decimal("5.9"), max_term=72)


@pytest.fixture
def scorer(current_year):
    return ConfidenceScorer(current_year)


class TestCreditBuffer:

    @pytest.mark.parametrize("score,expected", [
        (750, 100),
        (720, 100),
        (719, 85),
        (710, 85),
        (709, 70),
        (700, 70),
    ])
    def test_buffer_deductions(self, scorer, make_deal, score, expected):
        assert scorer.score(TIER, make_deal(creditScore=score)) == Decimal(expected)


class TestDebtToIncome:

    @pytest.mark.parametrize("debt,expected", [
        (2000, 100),   # 40% is not above 40
        (2100, 90),    # 42%
        (2300, 80),    # 46%
        (2600, 60),    # 52%: all three DTI deductions stack
    ])
    def test_dti_deductions(self, scorer, make_deal, debt, expected):
        deal = make_deal(monthlyIncome=5000, monthlyDebt=debt)
        assert scorer.score(TIER, deal) == Decimal(expected)

    def test_zero_income_skips_dti(self, scorer, make_deal):
        assert scorer.score(TIER, make_deal(monthlyIncome=0)) == Decimal("100")


class TestVehicle:

    @pytest.mark.parametrize("age,expected", [(7, 100), (8, 95), (10, 95), (11, 85)])
    def test_age_deductions(self, scorer, make_deal, current_year, age, expected):
        assert scorer.score(TIER, make_deal(vehicleYear=current_year - age)) == Decimal(expected)

    @pytest.mark.parametrize("miles,expected", [
        (80000, 100),
        (90000, 95),
        (110000, 85),
        (125000, 70),
    ])
    def test_mileage_deductions(self, scorer, make_deal, miles, expected):
        assert scorer.score(TIER, make_deal(vehicleMiles=miles)) == Decimal(expected)


class TestClamp:

    def test_never_below_zero(self, scorer, make_deal, current_year):
        """-30 credit, -40 DTI, -15 age, -30 mileage = -15, clamped to 0"""
        deal = make_deal(
            creditScore=700,
            monthlyIncome=5000,
            monthlyDebt=3000,
            vehicleYear=current_year - 12,
            vehicleMiles=130000,
        )
        assert scorer.score(TIER, deal) == Decimal("0")

    def test_bands_combine(self, scorer, make_deal, current_year):
        """-15 credit, -10 DTI, -5 age, -5 mileage = 65"""
        deal = make_deal(
            creditScore=715,
            monthlyIncome=5000,
            monthlyDebt=2100,
            vehicleYear=current_year - 8,
            vehicleMiles=85000,
        )
        assert scorer.score(TIER, deal) == Decimal("65")
