"""
Calculators Package

Provides all calculation components for deal analysis.
"""

from .confidence import ConfidenceScorer
from .eligibility import EligibilityDecision, EligibilityFilter
from .structure import StructureCalculator

__all__ = [
    "EligibilityFilter",
    "EligibilityDecision",
    "StructureCalculator",
    "ConfidenceScorer",
]
