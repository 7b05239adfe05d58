"""
Profit Optimizer

Re-derives the top-ranked structure for maximum dealer profit on the same
lender/tier, and estimates what that costs in approval confidence.
"""

import logging
from dataclasses import replace
from decimal import Decimal

from .analyzer import DealAnalyzer
from .calculators.metrics import HUNDRED, loan_to_value, monthly_payment, vehicle_age
from .calculators.structure import WARRANTY, StructureCalculator, gap_product, total_dealer_profit
from .models import (
    AnalysisResult, BackendProduct, CreditTier, DealInput, LenderProfile,
    NoEligibleLender, OptimizationResult, Structure
)

logger = logging.getLogger(__name__)

APPEARANCE = "Appearance Protection"


class ProfitOptimizer:
    """
    Builds the profit-maximized variant of the best structure.

    Steps:
    1. Rate markup by credit band (capped at the tier rate)
    2. Term extension to the next eligible term
    3. Richer backend product matrix
    4. Payment, reserve and profit recomputed
    5. Confidence penalty for the added rate, term and backend
    """

    # (minimum credit score, rate markup), checked top-down
    RATE_MARKUPS = [
        (740, Decimal("0.5")),
        (700, Decimal("0.75")),
        (660, Decimal("1.0")),
        (620, Decimal("1.5")),
        (580, Decimal("2.0")),
    ]
    DEEP_SUBPRIME_MARKUP = Decimal("2.5")

    ELIGIBLE_TERMS = [48, 60, 66, 72, 75, 78, 84]

    # (minimum vehicle price, warranty amount, dealer cost ratio), checked top-down
    WARRANTY_MATRIX = [
        (Decimal("30000"), Decimal("3500"), Decimal("0.42")),
        (Decimal("20000"), Decimal("2800"), Decimal("0.45")),
        (Decimal("0"), Decimal("1800"), Decimal("0.48")),
    ]

    APPEARANCE_MIN_PRICE = Decimal("15000")
    APPEARANCE_PRICE = Decimal("895")
    APPEARANCE_COST_RATIO = Decimal("0.18")

    # Term factor applied to the added rate spread
    RESERVE_TERM_DIVISOR = 24

    def __init__(self, analyzer: DealAnalyzer):
        self.analyzer = analyzer
        self.current_year = analyzer.current_year

    def optimize(self, deal: DealInput) -> OptimizationResult | NoEligibleLender:
        """Analyze the deal and optimize its best-ranked structure."""
        results = self.analyzer.analyze(deal)
        if not results:
            logger.info("No eligible lenders found; nothing to optimize")
            return NoEligibleLender()

        return self.optimize_result(results[0], deal)

    def optimize_result(self, base: AnalysisResult, deal: DealInput) -> OptimizationResult:
        """Optimize a given analysis result using its own lender and tier."""
        optimized = self._optimized_result(base, deal)

        original_profit = base.structure.total_dealer_profit
        optimized_profit = optimized.structure.total_dealer_profit

        if original_profit == 0:
            percent = None
        else:
            percent = (optimized_profit / original_profit - 1) * HUNDRED

        return OptimizationResult(
            original=base,
            optimized=optimized,
            profit_increase=optimized_profit - original_profit,
            profit_increase_percent=percent,
        )

    def _optimized_result(self, base: AnalysisResult, deal: DealInput) -> AnalysisResult:
        lender, tier = base.lender, base.tier
        structure = base.structure
        loan_amount = structure.approved_loan_amount

        rate = self.optimize_rate(structure.rate, tier, deal.credit_score)
        term = self.optimize_term(structure.term, tier, deal)
        products = self.optimize_backend_products(lender, deal.vehicle_price, loan_amount)
        reserve = self.calculate_optimized_reserve(loan_amount, structure.rate, rate, term)

        optimized = replace(
            structure,
            rate=rate,
            term=term,
            monthly_payment=monthly_payment(loan_amount, rate, term),
            backend_products=products,
            dealer_reserve=reserve,
            total_dealer_profit=total_dealer_profit(reserve, products),
        )

        return replace(
            base,
            structure=optimized,
            approval_confidence=self.recalculate_confidence(base.approval_confidence, structure, optimized),
        )

    def optimize_rate(self, base_rate: Decimal, tier: CreditTier, credit_score: int) -> Decimal:
        """Base rate plus the credit-band markup, never above the tier rate."""
        markup = self.DEEP_SUBPRIME_MARKUP
        for min_score, band_markup in self.RATE_MARKUPS:
            if credit_score >= min_score:
                markup = band_markup
                break

        return min(base_rate + markup, tier.max_rate)

    def optimize_term(self, base_term: int, tier: CreditTier, deal: DealInput) -> int:
        """
        Next eligible term above the base term, within the tier maximum.

        Older or high-mileage collateral limits how far the term can stretch.
        Keeps the base term if no candidate qualifies.
        """
        max_term = tier.max_term or StructureCalculator.DEFAULT_MAX_TERM
        age = vehicle_age(deal.vehicle_year, self.current_year)
        miles = deal.vehicle_miles

        for term in self.ELIGIBLE_TERMS:
            if term <= base_term or term > max_term:
                continue
            if ((age <= 7 or term <= 60)
                    and (miles <= 100000 or term <= 60)
                    and (miles <= 120000 or term <= 48)):
                return term

        return base_term

    def optimize_backend_products(
        self,
        lender: LenderProfile,
        vehicle_price: Decimal,
        loan_amount: Decimal
    ) -> tuple[BackendProduct, ...]:
        """Price-banded warranty, GAP when LTV qualifies, appearance protection."""
        products = []

        for min_price, amount, cost_ratio in self.WARRANTY_MATRIX:
            if vehicle_price >= min_price:
                if lender.max_warranty is not None:
                    amount = min(lender.max_warranty, amount)
                products.append(BackendProduct.priced(WARRANTY, amount, cost_ratio))
                break

        gap = gap_product(lender, loan_to_value(loan_amount, vehicle_price))
        if gap:
            products.append(gap)

        if vehicle_price >= self.APPEARANCE_MIN_PRICE:
            products.append(BackendProduct.priced(APPEARANCE, self.APPEARANCE_PRICE, self.APPEARANCE_COST_RATIO))

        return tuple(products)

    def calculate_optimized_reserve(
        self,
        principal: Decimal,
        base_rate: Decimal,
        new_rate: Decimal,
        term: int
    ) -> Decimal:
        """
        Reserve on the added spread only: principal x spread x (term / 24).

        This is not the base reserve formula; the lender's configured reserve
        does not carry over into the optimized structure.
        """
        spread = new_rate - base_rate
        return principal * (spread / HUNDRED) * (Decimal(term) / self.RESERVE_TERM_DIVISOR)

    def recalculate_confidence(self, base_confidence: Decimal, original: Structure, optimized: Structure) -> Decimal:
        """
        Penalize the base confidence for what the optimization added.

        -1.5 per 0.25 rate points, -2 per 12 months of added term, -3 per
        $1,000 of added backend. Clamped to 0-100.
        """
        adjustment = Decimal("0")

        rate_increase = optimized.rate - original.rate
        adjustment -= rate_increase / Decimal("0.25") * Decimal("1.5")

        if optimized.term > original.term:
            adjustment -= Decimal(optimized.term - original.term) / 12 * 2

        backend_increase = optimized.backend_total - original.backend_total
        if backend_increase > 0:
            adjustment -= backend_increase / 1000 * 3

        return max(min(base_confidence + adjustment, Decimal("100")), Decimal("0"))
