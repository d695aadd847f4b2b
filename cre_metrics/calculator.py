"""
Investment metrics calculator.

Composes the calculation engine into one result for one input bundle:
NOI -> price ratios -> debt service -> debt ratios -> projected cash flows
-> IRR.
"""

import logging
from typing import Dict, List, Optional

from cre_metrics.calculations import amortization, cashflow, irr, noi
from cre_metrics.config import Settings, get_settings
from cre_metrics.models import CalculatorInputs, InvestmentMetrics

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when an input bundle fails caller-side validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def validate_inputs(inputs: CalculatorInputs) -> None:
    """
    Check an input bundle before calculating.

    The calculator itself never raises on degenerate inputs; this is the
    pre-flight check callers run first.

    Raises:
        InvalidInputError: listing every failed check
    """
    errors = []

    if inputs.purchase_price <= 0:
        errors.append("Purchase price must be greater than 0")
    if inputs.annual_rent < 0:
        errors.append("Annual rent cannot be negative")
    if inputs.operating_expenses < 0:
        errors.append("Operating expenses cannot be negative")
    if inputs.loan_amount < 0:
        errors.append("Loan amount cannot be negative")
    if inputs.interest_rate < 0 or inputs.interest_rate > 1:
        errors.append("Interest rate must be between 0 and 1")
    if inputs.amortization_years <= 0:
        errors.append("Amortization years must be greater than 0")

    if errors:
        raise InvalidInputError(errors)


def calculate_investment_metrics(
    inputs: CalculatorInputs, settings: Optional[Settings] = None
) -> InvestmentMetrics:
    """
    Compute all investment metrics for a commercial real estate deal.

    Unset growth rates and selling costs fall back to the configured
    defaults.
    """
    settings = settings or get_settings()

    # Operations
    annual_noi = noi.calculate_noi(
        inputs.annual_rent, inputs.operating_expenses, inputs.vacancy_rate
    )
    cap_rate = noi.calculate_cap_rate(annual_noi, inputs.purchase_price)
    grm = noi.calculate_grm(inputs.purchase_price, inputs.annual_rent)

    # Financing
    loan = inputs.loan_params()
    debt_service = amortization.calculate_annual_debt_service(**loan.model_dump())
    dscr = amortization.calculate_dscr(annual_noi, debt_service)
    ltv = amortization.calculate_ltv(inputs.loan_amount, inputs.purchase_price)

    # Equity: down payment plus closing costs
    initial_cash_investment = (
        inputs.purchase_price * (1 - ltv)
        + inputs.purchase_price * inputs.closing_costs
    )
    cash_on_cash = irr.calculate_cash_on_cash_return(
        annual_noi, debt_service, initial_cash_investment
    )

    # Hold and exit
    projection = inputs.projection_params(
        initial_investment=initial_cash_investment,
        annual_noi=annual_noi,
        debt_service=debt_service,
        default_rent_growth_rate=settings.default_rent_growth_rate,
        default_expense_growth_rate=settings.default_expense_growth_rate,
        default_selling_costs=settings.default_selling_costs,
    )
    cash_flows = cashflow.build_cash_flows(**projection.model_dump())

    irr_result = irr.solve_irr(
        cash_flows,
        guess=settings.irr_guess,
        tolerance=settings.irr_tolerance,
        max_iterations=settings.irr_max_iterations,
        lower_bound=settings.irr_lower_bound,
        upper_bound=settings.irr_upper_bound,
        bisection_upper=settings.irr_bisection_upper,
    )

    logger.debug(
        f"NOI {annual_noi:.2f}, debt service {debt_service:.2f}, "
        f"IRR {irr_result.rate:.4f} ({irr_result.status.value})"
    )

    return InvestmentMetrics(
        noi=annual_noi,
        cap_rate=cap_rate,
        grm=grm,
        debt_service=debt_service,
        dscr=dscr,
        ltv=ltv,
        cash_on_cash_return=cash_on_cash,
        irr=irr_result.rate,
        irr_status=irr_result.status,
        equity_multiple=irr.calculate_multiple(cash_flows),
        total_profit=irr.calculate_profit(cash_flows),
        initial_cash_investment=initial_cash_investment,
        cash_flows=cash_flows,
    )


def safe_calculate(
    inputs: CalculatorInputs, settings: Optional[Settings] = None
) -> Optional[InvestmentMetrics]:
    """Validate and calculate, returning None for invalid inputs."""
    try:
        validate_inputs(inputs)
    except InvalidInputError as e:
        logger.warning(f"Skipping calculation: {e}")
        return None

    return calculate_investment_metrics(inputs, settings)


def quick_calculation(
    purchase_price: float, annual_rent: float, operating_expenses: float
) -> Dict[str, float]:
    """NOI, Cap Rate and GRM with no vacancy and no financing."""
    annual_noi = noi.calculate_noi(annual_rent, operating_expenses, 0.0)
    return {
        "noi": annual_noi,
        "cap_rate": noi.calculate_cap_rate(annual_noi, purchase_price),
        "grm": noi.calculate_grm(purchase_price, annual_rent),
    }
