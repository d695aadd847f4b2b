"""
Commercial real estate investment metrics engine.

NOI, Cap Rate, GRM, debt service, DSCR, LTV, Cash-on-Cash Return and IRR
from property, loan and hold-period assumptions.
"""

from cre_metrics.calculator import (
    InvalidInputError,
    calculate_investment_metrics,
    quick_calculation,
    safe_calculate,
    validate_inputs,
)
from cre_metrics.models import (
    CalculatorInputs,
    CashFlowPoint,
    InvestmentMetrics,
    IRRResult,
    IRRStatus,
    LoanParams,
    ProjectionParams,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidInputError",
    "calculate_investment_metrics",
    "quick_calculation",
    "safe_calculate",
    "validate_inputs",
    "CalculatorInputs",
    "CashFlowPoint",
    "InvestmentMetrics",
    "IRRResult",
    "IRRStatus",
    "LoanParams",
    "ProjectionParams",
]
