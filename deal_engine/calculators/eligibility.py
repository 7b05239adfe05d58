"""
Eligibility Filter

Matches a deal to a lender's credit tier and applies the lender's hard gates.
"""

from dataclasses import dataclass

from ..models import CreditTier, DealInput, LenderProfile
from .metrics import payment_to_income, vehicle_age


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of screening one lender. tier is set only when eligible."""

    tier: CreditTier | None = None
    reason: str | None = None

    @property
    def eligible(self) -> bool:
        return self.tier is not None and self.reason is None


class EligibilityFilter:
    """Selects the matching credit tier and enforces hard eligibility gates."""

    def __init__(self, current_year: int):
        self.current_year = current_year

    def evaluate(self, lender: LenderProfile, deal: DealInput) -> EligibilityDecision:
        """
        Screen a deal against one lender.

        Every gate must pass; there is no fallback to a lower tier. Gates that
        the lender does not configure are skipped.
        """
        tier = self.find_credit_tier(lender, deal.credit_score)
        if tier is None:
            return EligibilityDecision(reason=f"credit score {deal.credit_score} below all tiers")

        reason = self._check_gates(lender, deal)
        if reason:
            return EligibilityDecision(reason=reason)

        return EligibilityDecision(tier=tier)

    @staticmethod
    def find_credit_tier(lender: LenderProfile, credit_score: int) -> CreditTier | None:
        """First tier, in configured order, whose minimum score is met."""
        for tier in lender.credit_tiers:
            if credit_score >= tier.min_score:
                return tier
        return None

    def _check_gates(self, lender: LenderProfile, deal: DealInput) -> str | None:
        """Return the first failing gate's reason, or None if all pass."""
        income = deal.monthly_income

        # DTI/PTI are undefined without income
        if income <= 0:
            return "no monthly income"

        if lender.min_income is not None and income < lender.min_income:
            return f"income {income} below minimum {lender.min_income}"

        if lender.max_pti is not None:
            pti = payment_to_income(deal.amount_requested, income)
            if pti > lender.max_pti:
                return f"PTI {pti:.2f} above maximum {lender.max_pti}"

        restrictions = lender.vehicle_restrictions
        age = vehicle_age(deal.vehicle_year, self.current_year)
        if restrictions.max_age is not None and age > restrictions.max_age:
            return f"vehicle age {age} above maximum {restrictions.max_age}"

        if restrictions.max_mileage is not None and deal.vehicle_miles > restrictions.max_mileage:
            return f"mileage {deal.vehicle_miles} above maximum {restrictions.max_mileage}"

        return None
