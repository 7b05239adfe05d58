"""
Tests for the Deal Analyzer

End-to-end analysis across a lender catalog: filtering, structuring,
scoring and ranking.
"""

from decimal import Decimal

import pytest

from deal_engine.analyzer import DealAnalyzer
from deal_engine.models import LenderCatalog

PRIME = {"name": "Prime", "minScore": 720, "maxLTV": 125, "maxTerm": 84, "maxRate": 6.49}
NEAR_PRIME = {"name": "Near Prime", "minScore": 640, "maxLTV": 115, "maxTerm": 72, "maxRate": 11.5}
SUBPRIME = {"name": "Subprime", "minScore": 560, "maxLTV": 100, "maxTerm": 60, "maxRate": 17.9}


class TestScenarios:
    """Reference deals with known outcomes."""

    def test_clean_prime_deal(self, single_lender_catalog, make_deal, current_year):
        """750 score, 20% DTI, 2-year-old car with 20k miles: full confidence."""
        results = DealAnalyzer(single_lender_catalog, current_year).analyze(make_deal())

        assert len(results) == 1
        result = results[0]
        assert result.lender_name == "Test Lender"
        assert result.tier_name == "Tier A"
        assert result.structure.approved_loan_amount == Decimal("22000")
        assert result.structure.term == 72
        assert result.structure.rate == Decimal("5.9")
        assert result.approval_confidence == Decimal("100")

    def test_high_mileage_deal(self, single_lender_catalog, make_deal, current_year):
        """130k miles caps the term at 48 and adds the 1.0 mileage surcharge."""
        results = DealAnalyzer(single_lender_catalog, current_year).analyze(make_deal(vehicleMiles=130000))

        structure = results[0].structure
        assert structure.term == 48
        assert structure.rate == Decimal("6.9")
        assert results[0].approval_confidence == Decimal("70")

    def test_empty_catalog(self, make_deal, current_year):
        assert DealAnalyzer(LenderCatalog.empty(), current_year).analyze(make_deal()) == []


class TestFiltering:

    @pytest.fixture
    def catalog(self, make_catalog):
        return make_catalog(
            prime_only={"name": "Prime Bank", "tiers": [PRIME]},
            broad={"name": "Broad Credit", "tiers": [NEAR_PRIME, SUBPRIME]},
            picky={"name": "Picky Auto", "tiers": [PRIME, NEAR_PRIME], "minIncome": 8000},
        )

    def test_lender_absent_when_score_below_every_tier(self, catalog, make_deal, current_year):
        results = DealAnalyzer(catalog, current_year).analyze(make_deal(creditScore=650))
        assert "Prime Bank" not in [r.lender_name for r in results]
        assert [r.lender_name for r in results] == ["Broad Credit"]

    def test_gate_failure_removes_lender(self, catalog, make_deal, current_year):
        results = DealAnalyzer(catalog, current_year).analyze(make_deal(creditScore=780))
        assert sorted(r.lender_name for r in results) == ["Broad Credit", "Prime Bank"]

    def test_no_eligible_lender(self, catalog, make_deal, current_year):
        assert DealAnalyzer(catalog, current_year).analyze(make_deal(creditScore=500)) == []

    def test_zero_income_is_never_eligible(self, catalog, make_deal, current_year):
        assert DealAnalyzer(catalog, current_year).analyze(make_deal(monthlyIncome=0)) == []

    def test_result_carries_matched_lender_and_tier(self, catalog, make_deal, current_year):
        results = DealAnalyzer(catalog, current_year).analyze(make_deal(creditScore=650))
        assert results[0].lender is catalog.lenders[1]
        assert results[0].tier.name == "Near Prime"


class TestRanking:

    def test_sorted_by_confidence_descending(self, make_catalog, make_deal, current_year):
        catalog = make_catalog(
            # 700 score: 0 buffer -> 70
            tight={"name": "Tight", "tiers": [{**NEAR_PRIME, "minScore": 700}]},
            # 85 buffer -> 100
            loose={"name": "Loose", "tiers": [SUBPRIME]},
            # 15 buffer -> 85
            middle={"name": "Middle", "tiers": [{**NEAR_PRIME, "minScore": 685}]},
        )
        results = DealAnalyzer(catalog, current_year).analyze(make_deal(creditScore=700))

        assert [r.lender_name for r in results] == ["Loose", "Middle", "Tight"]
        confidences = [r.approval_confidence for r in results]
        assert all(a >= b for a, b in zip(confidences, confidences[1:]))

    def test_ties_keep_catalog_order(self, make_catalog, make_deal, current_year):
        catalog = make_catalog(
            first={"name": "First"},
            weaker={"name": "Weaker", "tiers": [{**NEAR_PRIME, "minScore": 745}]},
            second={"name": "Second"},
            third={"name": "Third"},
        )
        results = DealAnalyzer(catalog, current_year).analyze(make_deal())
        assert [r.lender_name for r in results] == ["First", "Second", "Third", "Weaker"]

    def test_repeated_analysis_is_identical(self, make_catalog, make_deal, current_year):
        catalog = make_catalog(
            a={"name": "A", "tiers": [PRIME, NEAR_PRIME], "dealerReserve": 2},
            b={"name": "B", "tiers": [NEAR_PRIME, SUBPRIME], "dealerReserve": {"percentage": 1.5}},
        )
        analyzer = DealAnalyzer(catalog, current_year)
        deal = make_deal(creditScore=725, vehicleMiles=90000)
        assert analyzer.analyze(deal) == analyzer.analyze(deal)


class TestStructureProperties:

    @pytest.fixture
    def catalog(self, make_catalog):
        return make_catalog(
            low_ltv={"name": "Low LTV", "tiers": [{**SUBPRIME, "maxLTV": 60}]},
            mid_ltv={"name": "Mid LTV", "tiers": [{**SUBPRIME, "maxLTV": 85}]},
            high_ltv={"name": "High LTV", "tiers": [{**SUBPRIME, "maxLTV": 140}]},
        )

    @pytest.mark.parametrize("down_payment", [0, 3000, 9000, 20000])
    def test_loan_within_ltv_cap_and_gap_rule(self, catalog, make_deal, current_year, down_payment):
        deal = make_deal(downPayment=down_payment)
        for result in DealAnalyzer(catalog, current_year).analyze(deal):
            structure = result.structure
            cap = deal.vehicle_price * result.tier.max_ltv / 100
            assert structure.approved_loan_amount <= cap

            ltv = structure.approved_loan_amount / deal.vehicle_price * 100
            has_gap = any(p.name == "GAP Insurance" for p in structure.backend_products)
            assert has_gap == (ltv >= 70)

    def test_metrics_attached(self, single_lender_catalog, make_deal, current_year):
        result = DealAnalyzer(single_lender_catalog, current_year).analyze(make_deal())[0]
        assert result.metrics.dti == Decimal("20")
        assert result.metrics.front_end_ltv == Decimal("88")
        assert result.metrics.vehicle_age == 2
