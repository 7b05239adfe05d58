"""Pytest fixtures for deal engine tests"""

import pytest

from deal_engine.models import DealInput, LenderCatalog, LenderProfile

CURRENT_YEAR = 2025

DEFAULT_TIER = {"name": "Tier A", "minScore": 700, "maxLTV": 120, "maxTerm": 72, "maxRate": 5.9}


def lender_config(name="Test Lender", tiers=None, **extra) -> dict:
    """Lender entry in lender-file format; extra keys are camelCase fields."""
    config = {"name": name, "creditTiers": tiers if tiers is not None else [dict(DEFAULT_TIER)]}
    config.update(extra)
    return config


def deal_data(**overrides) -> dict:
    """A clean prime deal: 750 score, 20% DTI, 2-year-old car, 20k miles."""
    data = {
        "creditScore": 750,
        "monthlyIncome": 6000,
        "monthlyDebt": 1200,
        "vehiclePrice": 25000,
        "downPayment": 3000,
        "vehicleYear": CURRENT_YEAR - 2,
        "vehicleMiles": 20000,
    }
    data.update(overrides)
    return data


@pytest.fixture
def current_year() -> int:
    return CURRENT_YEAR


@pytest.fixture
def make_lender():
    """Factory for a single LenderProfile."""
    def _make(lender_id="test", **kwargs) -> LenderProfile:
        return LenderProfile.from_dict(lender_id, lender_config(**kwargs))
    return _make


@pytest.fixture
def make_catalog():
    """Factory for a catalog; each keyword is a lender id mapped to lender_config kwargs."""
    def _make(**lenders) -> LenderCatalog:
        return LenderCatalog.from_dict({lid: lender_config(**cfg) for lid, cfg in lenders.items()})
    return _make


@pytest.fixture
def make_deal():
    """Factory for DealInput with camelCase overrides."""
    def _make(**overrides) -> DealInput:
        return DealInput.from_dict(deal_data(**overrides))
    return _make


@pytest.fixture
def sample_deal_data() -> dict:
    return deal_data()


@pytest.fixture
def single_lender_catalog() -> LenderCatalog:
    return LenderCatalog.from_dict({"test": lender_config()})
