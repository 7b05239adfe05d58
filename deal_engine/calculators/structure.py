"""
Structure Calculator

Derives the financing structure for a matched lender/tier: loan amount, term,
rate, payment, backend products, dealer reserve and total dealer profit.
"""

from decimal import Decimal

from ..models import BackendProduct, CreditTier, DealInput, DealerReserve, LenderProfile, Structure
from .metrics import HUNDRED, loan_to_value, monthly_payment, vehicle_age

WARRANTY = "Extended Warranty"
GAP = "GAP Insurance"

# GAP is offered once the financed amount reaches this share of the price
GAP_LTV_THRESHOLD = Decimal("70")
GAP_PRICE = Decimal("895")
DEFAULT_MAX_GAP = Decimal("1000")
GAP_COST_RATIO = Decimal("0.30")


def gap_product(lender: LenderProfile, front_end_ltv: Decimal) -> BackendProduct | None:
    """GAP insurance, when the front-end LTV qualifies."""
    if front_end_ltv < GAP_LTV_THRESHOLD:
        return None
    max_gap = lender.max_gap if lender.max_gap is not None else DEFAULT_MAX_GAP
    return BackendProduct.priced(GAP, min(max_gap, GAP_PRICE), GAP_COST_RATIO)


def total_dealer_profit(dealer_reserve: Decimal, products) -> Decimal:
    return dealer_reserve + sum((p.profit for p in products), Decimal("0"))


class StructureCalculator:
    """Builds the base (approval-oriented) structure for a lender/tier."""

    DEFAULT_MAX_TERM = 72
    DEFAULT_MAX_WARRANTY = Decimal("3000")

    WARRANTY_PRICE_RATIO = Decimal("0.15")
    WARRANTY_COST_RATIO = Decimal("0.45")

    def __init__(self, current_year: int):
        self.current_year = current_year

    def calculate(self, lender: LenderProfile, tier: CreditTier, deal: DealInput) -> Structure:
        """Calculate the complete structure for an eligible deal."""
        age = vehicle_age(deal.vehicle_year, self.current_year)

        loan_amount = self.calculate_loan_amount(tier, deal)
        term = self.calculate_max_term(tier, age, deal.vehicle_miles)
        rate = self.calculate_rate(tier, age, deal.vehicle_miles, term)
        products = self.calculate_backend_products(lender, deal.vehicle_price, loan_amount)
        reserve = self.calculate_dealer_reserve(lender.dealer_reserve, loan_amount)

        return Structure(
            approved_loan_amount=loan_amount,
            # Echoes the buyer's down payment even when the LTV cap leaves a gap
            recommended_down_payment=deal.down_payment,
            term=term,
            rate=rate,
            monthly_payment=monthly_payment(loan_amount, rate, term),
            backend_products=products,
            dealer_reserve=reserve,
            total_dealer_profit=total_dealer_profit(reserve, products),
        )

    def calculate_loan_amount(self, tier: CreditTier, deal: DealInput) -> Decimal:
        """Requested amount, capped at the tier's maximum LTV."""
        max_loan_amount = deal.vehicle_price * tier.max_ltv / HUNDRED
        return min(deal.amount_requested, max_loan_amount)

    def calculate_max_term(self, tier: CreditTier, age: int, miles: int) -> int:
        """
        Longest term the collateral supports.

        Mileage caps apply first, then age caps. Each cap only lowers the
        term, so the most restrictive one wins.
        """
        term = tier.max_term or self.DEFAULT_MAX_TERM

        if miles > 100000 and term > 60:
            term = 60
        if miles > 120000 and term > 48:
            term = 48

        if age > 7 and term > 60:
            term = 60
        if age > 10 and term > 48:
            term = 48

        return term

    def calculate_rate(self, tier: CreditTier, age: int, miles: int, term: int) -> Decimal:
        """Tier rate plus stacked term, mileage and age surcharges."""
        rate = tier.max_rate

        if term > 72:
            rate += Decimal("0.5")
        if term > 84:
            rate += Decimal("0.5")

        if miles > 100000:
            rate += Decimal("1.0")

        if age > 5:
            rate += Decimal("0.5")
        if age > 8:
            rate += Decimal("0.5")

        return rate

    def calculate_backend_products(
        self,
        lender: LenderProfile,
        vehicle_price: Decimal,
        loan_amount: Decimal
    ) -> tuple[BackendProduct, ...]:
        """Warranty (capped at 15% of price) plus GAP when LTV qualifies."""
        products = []

        max_warranty = lender.max_warranty if lender.max_warranty is not None else self.DEFAULT_MAX_WARRANTY
        warranty_amount = min(max_warranty, vehicle_price * self.WARRANTY_PRICE_RATIO)
        if warranty_amount > 0:
            products.append(BackendProduct.priced(WARRANTY, warranty_amount, self.WARRANTY_COST_RATIO))

        gap = gap_product(lender, loan_to_value(loan_amount, vehicle_price))
        if gap:
            products.append(gap)

        return tuple(products)

    @staticmethod
    def calculate_dealer_reserve(reserve: DealerReserve, loan_amount: Decimal) -> Decimal:
        if reserve.kind == DealerReserve.NONE:
            return Decimal("0")
        return loan_amount * reserve.percentage / HUNDRED
