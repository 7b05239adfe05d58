"""
Output Builder

Converts analysis and optimization results into API response dictionaries.
"""

from decimal import ROUND_HALF_UP, Decimal

from .models import AnalysisResult, BackendProduct, DealMetrics, NoEligibleLender, OptimizationResult, Structure

CENTS = Decimal("0.01")


def quantize_2dp(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return float(quantize_2dp(value))


def to_rate(value: Decimal | None) -> float | None:
    """Rates, ratios and percentages are reported to 2 decimal places."""
    if value is None:
        return None
    return float(quantize_2dp(value))


class OutputBuilder:
    """Builds the final output responses."""

    def build_analysis(self, results: list[AnalysisResult]) -> list[dict]:
        return [self._build_result(r) for r in results]

    def build_optimization(self, outcome: OptimizationResult | NoEligibleLender) -> dict:
        if isinstance(outcome, NoEligibleLender):
            return {"error": outcome.error}

        return {
            "original": self._build_result(outcome.original),
            "optimized": self._build_result(outcome.optimized),
            "profitIncrease": to_money(outcome.profit_increase),
            "profitIncreasePercent": to_rate(outcome.profit_increase_percent),
        }

    def _build_result(self, result: AnalysisResult) -> dict:
        output = {
            "lender": result.lender_name,
            "tier": result.tier_name,
            "structure": self._build_structure(result.structure),
            "approvalConfidence": to_rate(result.approval_confidence),
        }
        if result.metrics:
            output["metrics"] = self._build_metrics(result.metrics)
        return output

    def _build_structure(self, structure: Structure) -> dict:
        return {
            "approvedLoanAmount": to_money(structure.approved_loan_amount),
            "recommendedDownPayment": to_money(structure.recommended_down_payment),
            "term": structure.term,
            "rate": to_rate(structure.rate),
            "monthlyPayment": to_money(structure.monthly_payment),
            "backendProducts": [self._build_product(p) for p in structure.backend_products],
            "dealerReserve": to_money(structure.dealer_reserve),
            "totalDealerProfit": to_money(structure.total_dealer_profit),
        }

    def _build_product(self, product: BackendProduct) -> dict:
        return {
            "name": product.name,
            "amount": to_money(product.amount),
            "dealerCost": to_money(product.dealer_cost),
            "profit": to_money(product.profit),
        }

    def _build_metrics(self, metrics: DealMetrics) -> dict:
        return {
            "dti": to_rate(metrics.dti),
            "frontEndLTV": to_rate(metrics.front_end_ltv),
            "vehicleAge": metrics.vehicle_age,
        }
