"""
DEAL STRUCTURING ENGINE
Lender matching, structure calculation and profit optimization
"""

from .catalog import load_catalog
from .models import AnalysisResult, DealInput, LenderCatalog, NoEligibleLender, OptimizationResult
from .processor import DealProcessor

__all__ = [
    'DealProcessor',
    'DealInput',
    'LenderCatalog',
    'AnalysisResult',
    'OptimizationResult',
    'NoEligibleLender',
    'load_catalog',
]
