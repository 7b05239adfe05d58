"""
Domain Models for the Deal Structuring Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values, rates and ratios use Decimal for precision.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


def _finite_decimal(value) -> Decimal:
    """Convert a catalog number, rejecting NaN and infinities."""
    result = _to_decimal(value)
    if not result.is_finite():
        raise ValueError(f"expected a finite number, got: {value!r}")
    return result


def _optional_decimal(value) -> Decimal | None:
    """Convert a configured limit, treating absent/zero values as not configured."""
    if value is None or isinstance(value, bool):
        return None
    result = _finite_decimal(value)
    return result if result else None


def _optional_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    result = int(_finite_decimal(value))
    return result if result else None


# =============================================================================
# LENDER CATALOG MODELS
# =============================================================================


@dataclass(frozen=True)
class CreditTier:
    """A credit-score-banded pricing bracket owned by one lender."""

    name: str
    min_score: int
    max_ltv: Decimal
    max_rate: Decimal
    max_term: int | None = None  # None = engine default (72)

    @classmethod
    def from_dict(cls, data: dict) -> "CreditTier":
        return cls(
            name=data["name"],
            min_score=int(data["minScore"]),
            max_ltv=_finite_decimal(data["maxLTV"]),
            max_rate=_finite_decimal(data["maxRate"]),
            max_term=_optional_int(data.get("maxTerm")),
        )


@dataclass(frozen=True)
class VehicleRestrictions:
    """Collateral limits. None = not restricted."""

    max_age: int | None = None
    max_mileage: int | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "VehicleRestrictions":
        if not data:
            return cls()
        return cls(
            max_age=_optional_int(data.get("maxAge")),
            max_mileage=_optional_int(data.get("maxMileage")),
        )


@dataclass(frozen=True)
class DealerReserve:
    """
    Dealer reserve configuration, resolved once when the catalog is built.

    Lender files carry either a plain percentage (flat) or a nested
    {"percentage": ...} object (tiered). Anything else resolves to NONE,
    which pays no reserve.
    """

    FLAT = "flat"
    TIERED = "tiered"
    NONE = "none"

    kind: str = NONE
    percentage: Decimal = Decimal("0")

    @classmethod
    def from_config(cls, value: Any) -> "DealerReserve":
        if isinstance(value, bool):
            return cls()
        if isinstance(value, (int, float, Decimal)):
            pct = _to_decimal(value)
            if pct.is_finite():
                return cls(kind=cls.FLAT, percentage=pct)
        if isinstance(value, dict):
            pct = value.get("percentage")
            if isinstance(pct, (int, float, Decimal)) and not isinstance(pct, bool) and pct:
                pct = _to_decimal(pct)
                if pct.is_finite():
                    return cls(kind=cls.TIERED, percentage=pct)
        return cls()


@dataclass(frozen=True)
class LenderProfile:
    """A lender's eligibility gates, credit tiers and product limits."""

    lender_id: str
    name: str
    credit_tiers: tuple[CreditTier, ...]
    min_income: Decimal | None = None
    max_pti: Decimal | None = None
    vehicle_restrictions: VehicleRestrictions = field(default_factory=VehicleRestrictions)
    max_warranty: Decimal | None = None
    max_gap: Decimal | None = None
    dealer_reserve: DealerReserve = field(default_factory=DealerReserve)

    @classmethod
    def from_dict(cls, lender_id: str, data: dict) -> "LenderProfile":
        # Tiers are kept in configured order; the catalog must list them by
        # descending minScore for first-match selection to work.
        tiers = tuple(CreditTier.from_dict(t) for t in data["creditTiers"])
        return cls(
            lender_id=lender_id,
            name=data.get("name", lender_id),
            credit_tiers=tiers,
            min_income=_optional_decimal(data.get("minIncome")),
            max_pti=_optional_decimal(data.get("maxPTI")),
            vehicle_restrictions=VehicleRestrictions.from_dict(data.get("vehicleRestrictions")),
            max_warranty=_optional_decimal(data.get("maxWarranty")),
            max_gap=_optional_decimal(data.get("maxGAP")),
            dealer_reserve=DealerReserve.from_config(data.get("dealerReserve")),
        )


@dataclass(frozen=True)
class LenderCatalog:
    """Read-only, ordered lender panel shared by every request."""

    lenders: tuple[LenderProfile, ...] = ()

    def __iter__(self) -> Iterator[LenderProfile]:
        return iter(self.lenders)

    def __len__(self) -> int:
        return len(self.lenders)

    @classmethod
    def empty(cls) -> "LenderCatalog":
        return cls()

    @classmethod
    def from_dict(cls, data: Any) -> "LenderCatalog":
        """
        Build the catalog from already-parsed lender configuration.

        A missing or non-mapping configuration yields an empty catalog and a
        malformed lender entry is skipped; neither is fatal.
        """
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Lender configuration is not a mapping ({type(data).__name__}), using empty catalog")
            return cls.empty()

        lenders = []
        for lender_id, entry in data.items():
            try:
                lenders.append(LenderProfile.from_dict(str(lender_id), entry))
            except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
                logger.warning(f"Skipping malformed lender '{lender_id}': {e!r}")
        return cls(lenders=tuple(lenders))


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class DealInput:
    """The buyer's deal being structured."""

    credit_score: int
    monthly_income: Decimal
    monthly_debt: Decimal
    vehicle_price: Decimal
    down_payment: Decimal
    vehicle_year: int
    vehicle_miles: int

    @property
    def amount_requested(self) -> Decimal:
        """Amount the buyer needs financed before any LTV cap."""
        return self.vehicle_price - self.down_payment

    @classmethod
    def from_dict(cls, data: dict) -> "DealInput":
        return cls(
            credit_score=int(data["creditScore"]),
            monthly_income=_to_decimal(data["monthlyIncome"]),
            monthly_debt=_to_decimal(data.get("monthlyDebt", 0)),
            vehicle_price=_to_decimal(data["vehiclePrice"]),
            down_payment=_to_decimal(data.get("downPayment", 0)),
            vehicle_year=int(data["vehicleYear"]),
            vehicle_miles=int(data["vehicleMiles"]),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class BackendProduct:
    """An ancillary product sold alongside the financing."""

    name: str
    amount: Decimal
    dealer_cost: Decimal
    profit: Decimal

    @classmethod
    def priced(cls, name: str, amount: Decimal, cost_ratio: Decimal) -> "BackendProduct":
        dealer_cost = amount * cost_ratio
        return cls(name=name, amount=amount, dealer_cost=dealer_cost, profit=amount - dealer_cost)


@dataclass(frozen=True)
class Structure:
    """A complete financing structure for one lender/tier."""

    approved_loan_amount: Decimal
    recommended_down_payment: Decimal
    term: int
    rate: Decimal
    monthly_payment: Decimal
    backend_products: tuple[BackendProduct, ...]
    dealer_reserve: Decimal
    total_dealer_profit: Decimal

    @property
    def backend_total(self) -> Decimal:
        return sum((p.amount for p in self.backend_products), Decimal("0"))


@dataclass(frozen=True)
class DealMetrics:
    """Deal-level ratios computed once per analysis."""

    dti: Decimal | None
    front_end_ltv: Decimal
    vehicle_age: int


@dataclass(frozen=True)
class AnalysisResult:
    """One eligible lender's structure and approval likelihood."""

    lender_name: str
    tier_name: str
    structure: Structure
    approval_confidence: Decimal
    # Matched catalog entries, handed to the optimizer as-is
    lender: LenderProfile = field(repr=False, compare=False)
    tier: CreditTier = field(repr=False, compare=False)
    metrics: DealMetrics | None = None


@dataclass(frozen=True)
class OptimizationResult:
    """
    Base structure vs. profit-optimized structure.

    profit_increase_percent is None when the original structure carried no
    profit, since the ratio is undefined.
    """

    original: AnalysisResult
    optimized: AnalysisResult
    profit_increase: Decimal
    profit_increase_percent: Decimal | None


@dataclass(frozen=True)
class NoEligibleLender:
    """Returned by optimize when no lender accepts the deal."""

    error: str = "No eligible lenders found"
