"""
Deal Analyzer

Runs a deal against every lender in the catalog and ranks the eligible
structures by approval confidence.
"""

import logging

from .calculators import ConfidenceScorer, EligibilityFilter, StructureCalculator
from .calculators.metrics import deal_metrics
from .models import AnalysisResult, DealInput, LenderCatalog

logger = logging.getLogger(__name__)


class DealAnalyzer:
    """
    Orchestrates lender screening and structuring.

    Per lender, in catalog order:
    1. Eligibility (tier match + hard gates)
    2. Structure calculation
    3. Confidence scoring
    """

    def __init__(self, catalog: LenderCatalog, current_year: int):
        self.catalog = catalog
        self.current_year = current_year
        self.eligibility = EligibilityFilter(current_year)
        self.structure_calculator = StructureCalculator(current_year)
        self.confidence_scorer = ConfidenceScorer(current_year)

    def analyze(self, deal: DealInput) -> list[AnalysisResult]:
        """
        Analyze a deal across the catalog.

        Returns results sorted by approval confidence, highest first. Ties keep
        catalog order. No eligible lender gives an empty list.
        """
        metrics = deal_metrics(deal, self.current_year)
        results = []

        for lender in self.catalog:
            decision = self.eligibility.evaluate(lender, deal)
            if not decision.eligible:
                logger.debug(f"Lender {lender.lender_id} skipped: {decision.reason}")
                continue

            tier = decision.tier
            results.append(AnalysisResult(
                lender_name=lender.name,
                tier_name=tier.name,
                structure=self.structure_calculator.calculate(lender, tier, deal),
                approval_confidence=self.confidence_scorer.score(tier, deal),
                lender=lender,
                tier=tier,
                metrics=metrics,
            ))

        # sorted() is stable, including with reverse=True
        return sorted(results, key=lambda r: r.approval_confidence, reverse=True)
