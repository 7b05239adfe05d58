"""
Deal Processor - Main Entry Point

Owns the lender catalog and wires the analyzer, optimizer, validator and
output builder together for host applications.
"""

import json
from datetime import date
from typing import Any, Dict, List

from .analyzer import DealAnalyzer
from .models import AnalysisResult, DealInput, LenderCatalog, NoEligibleLender, OptimizationResult
from .optimizer import ProfitOptimizer
from .output import OutputBuilder
from .validators import InputValidator


class DealProcessor:
    """
    Main orchestrator for deal analysis.

    Two operations:
    - analyze: rank every eligible lender's structure by approval confidence
    - optimize: profit-maximize the best-ranked structure

    The catalog is read-only and the calculators keep no request state, so one
    processor can serve concurrent requests.
    """

    def __init__(self, catalog: LenderCatalog | None = None, current_year: int | None = None):
        self.catalog = catalog if catalog is not None else LenderCatalog.empty()
        self.current_year = current_year if current_year is not None else date.today().year
        self.validator = InputValidator()
        self.analyzer = DealAnalyzer(self.catalog, self.current_year)
        self.optimizer = ProfitOptimizer(self.analyzer)
        self.output_builder = OutputBuilder()

    def analyze(self, deal: DealInput) -> List[AnalysisResult]:
        return self.analyzer.analyze(deal)

    def optimize(self, deal: DealInput) -> OptimizationResult | NoEligibleLender:
        return self.optimizer.optimize(deal)

    def analyze_from_dict(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Analyze a deal from raw dictionary input.

        Convenience method for API usage.
        """
        deal = self.validator.parse(data)
        return self.output_builder.build_analysis(self.analyze(deal))

    def optimize_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Optimize a deal from raw dictionary input.

        Convenience method for API usage.
        """
        deal = self.validator.parse(data)
        return self.output_builder.build_optimization(self.optimize(deal))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def _run_json(operation, json_input: str) -> str:
    try:
        input_data = json.loads(json_input)
        return json.dumps(operation(input_data), indent=2)

    except (ValueError, KeyError) as e:
        # json.JSONDecodeError is a ValueError
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)


def analyze_deal_from_json(processor: DealProcessor, json_input: str) -> str:
    """
    Analyze a deal from a JSON string and return a JSON string.
    Validation problems are reported in the response body.
    """
    return _run_json(processor.analyze_from_dict, json_input)


def optimize_deal_from_json(processor: DealProcessor, json_input: str) -> str:
    """
    Optimize a deal from a JSON string and return a JSON string.
    Validation problems are reported in the response body.
    """
    return _run_json(processor.optimize_from_dict, json_input)
