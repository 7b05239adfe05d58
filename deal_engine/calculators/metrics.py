"""
Shared Deal Metrics

Amortization and the ratios (DTI, PTI, LTV) used across eligibility,
structuring, scoring and optimization. All functions are pure.
"""

from decimal import Decimal

from ..models import DealInput, DealMetrics

HUNDRED = Decimal("100")

# Risk-proxy payment used for PTI, independent of any lender's pricing
PTI_PROXY_RATE = Decimal("10")
PTI_PROXY_TERM = 60


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """
    Standard amortized payment: P * r * (1+r)^n / ((1+r)^n - 1).

    r is the monthly rate (annual percent / 1200). A zero rate falls back to
    straight-line repayment; a non-positive term has no payment.
    """
    if term_months <= 0:
        return Decimal("0")

    monthly_rate = annual_rate / Decimal("1200")
    if monthly_rate == 0:
        return principal / term_months

    factor = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * factor / (factor - 1)


def debt_to_income(monthly_debt: Decimal, monthly_income: Decimal) -> Decimal | None:
    """DTI as a percentage, or None when income is not positive."""
    if monthly_income <= 0:
        return None
    return monthly_debt / monthly_income * HUNDRED


def payment_to_income(loan_amount: Decimal, monthly_income: Decimal) -> Decimal | None:
    """PTI as a percentage using the fixed 10% / 60-month proxy payment."""
    if monthly_income <= 0:
        return None
    estimated = monthly_payment(loan_amount, PTI_PROXY_RATE, PTI_PROXY_TERM)
    return estimated / monthly_income * HUNDRED


def loan_to_value(loan_amount: Decimal, vehicle_price: Decimal) -> Decimal:
    """Front-end LTV as a percentage. A zero-priced vehicle has LTV 0."""
    if vehicle_price <= 0:
        return Decimal("0")
    return loan_amount / vehicle_price * HUNDRED


def vehicle_age(vehicle_year: int, current_year: int) -> int:
    return current_year - vehicle_year


def deal_metrics(deal: DealInput, current_year: int) -> DealMetrics:
    """Key ratios for the deal as requested, before any lender caps."""
    return DealMetrics(
        dti=debt_to_income(deal.monthly_debt, deal.monthly_income),
        front_end_ltv=loan_to_value(deal.amount_requested, deal.vehicle_price),
        vehicle_age=vehicle_age(deal.vehicle_year, current_year),
    )
