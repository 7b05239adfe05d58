"""
Input Validation for the Deal Structuring Engine

Validates deal input arriving from hosts before analysis begins.
Raises ValueError with clear messages for any constraint violations.

Zero income is accepted here: it is a business outcome (no lender is
eligible), not malformed input.
"""

from decimal import InvalidOperation

from .models import DealInput

REQUIRED_FIELDS = ["creditScore", "monthlyIncome", "vehiclePrice", "vehicleYear", "vehicleMiles"]


class InputValidator:
    """Validates deal input according to business rules."""

    MIN_CREDIT_SCORE = 300
    MAX_CREDIT_SCORE = 900

    def parse(self, data: dict) -> DealInput:
        """
        Build and validate a DealInput from a raw request dictionary.
        Raises KeyError for missing fields and ValueError for bad values.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Deal input must be an object, got: {type(data).__name__}")

        for name in REQUIRED_FIELDS:
            if data.get(name) is None:
                raise KeyError(name)

        try:
            deal = DealInput.from_dict(data)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Deal input contains a non-numeric value: {e!r}") from e

        self.validate(deal)
        return deal

    def validate(self, deal: DealInput) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        if not (self.MIN_CREDIT_SCORE <= deal.credit_score <= self.MAX_CREDIT_SCORE):
            raise ValueError(
                f"creditScore must be between {self.MIN_CREDIT_SCORE} and {self.MAX_CREDIT_SCORE}, "
                f"got: {deal.credit_score}"
            )

        if not deal.monthly_income.is_finite() or deal.monthly_income < 0:
            raise ValueError(f"monthlyIncome must be a non-negative number, got: {deal.monthly_income}")

        if not deal.monthly_debt.is_finite() or deal.monthly_debt < 0:
            raise ValueError(f"monthlyDebt must be a non-negative number, got: {deal.monthly_debt}")

        if not deal.vehicle_price.is_finite() or deal.vehicle_price < 0:
            raise ValueError(f"vehiclePrice must be a non-negative number, got: {deal.vehicle_price}")

        if not deal.down_payment.is_finite() or deal.down_payment < 0:
            raise ValueError(f"downPayment must be a non-negative number, got: {deal.down_payment}")

        if deal.vehicle_miles < 0:
            raise ValueError(f"vehicleMiles cannot be negative, got: {deal.vehicle_miles}")
