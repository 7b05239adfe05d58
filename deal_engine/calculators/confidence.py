"""
Confidence Scorer

Heuristic 0-100 approval likelihood for a structured deal.
"""

from decimal import Decimal

from ..models import CreditTier, DealInput
from .metrics import debt_to_income, vehicle_age


class ConfidenceScorer:
    """Scores approval likelihood by stacking independent deductions."""

    MAX_SCORE = 100

    def __init__(self, current_year: int):
        self.current_year = current_year

    def score(self, tier: CreditTier, deal: DealInput) -> Decimal:
        """
        Start at 100 and deduct for each risk threshold crossed.

        Thresholds within a band are not exclusive: a 125,000-mile vehicle
        loses the 80k, 100k and 120k deductions together.
        """
        score = self.MAX_SCORE

        # Credit buffer above the tier minimum
        buffer = deal.credit_score - tier.min_score
        if buffer < 20:
            score -= 15
        if buffer < 10:
            score -= 15

        dti = debt_to_income(deal.monthly_debt, deal.monthly_income)
        if dti is not None:
            if dti > 40:
                score -= 10
            if dti > 45:
                score -= 10
            if dti > 50:
                score -= 20

        age = vehicle_age(deal.vehicle_year, self.current_year)
        if age > 7:
            score -= 5
        if age > 10:
            score -= 10

        miles = deal.vehicle_miles
        if miles > 80000:
            score -= 5
        if miles > 100000:
            score -= 10
        if miles > 120000:
            score -= 15

        return Decimal(max(0, min(score, self.MAX_SCORE)))
