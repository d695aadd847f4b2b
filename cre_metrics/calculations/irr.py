"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson with a bisection fallback. The solver
never raises: degenerate series are reported through IRRResult.status and
the legacy sentinel rates (0 and -0.99).
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from cre_metrics.models import CashFlowPoint, IRRResult, IRRStatus

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DEFAULT_GUESS = 0.1
LOWER_BOUND = -0.99
UPPER_BOUND = 10.0
BISECTION_UPPER = 1.0

# Rate reported for a series that only ever loses money
TOTAL_LOSS_RATE = -0.99

CashFlows = Sequence[Union[float, CashFlowPoint]]


def _amounts(cash_flows: CashFlows) -> np.ndarray:
    """Extract amounts; discounting uses position in the series, not year."""
    return np.asarray(
        [cf.cash_flow if isinstance(cf, CashFlowPoint) else cf for cf in cash_flows],
        dtype=float,
    )


def calculate_npv(cash_flows: CashFlows, discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    amounts = _amounts(cash_flows)
    periods = np.arange(amounts.size)
    return float(np.sum(amounts / (1 + discount_rate) ** periods))


def _npv_and_derivative(amounts: np.ndarray, rate: float) -> Tuple[float, float]:
    """NPV and its derivative with respect to rate (for Newton-Raphson)."""
    periods = np.arange(amounts.size)
    discount = (1 + rate) ** periods
    npv = np.sum(amounts / discount)
    dnpv = -np.sum(periods * amounts / (discount * (1 + rate)))
    return float(npv), float(dnpv)


def _newton(
    amounts: np.ndarray,
    guess: float,
    tolerance: float,
    max_iterations: int,
    lower_bound: float,
    upper_bound: float,
) -> Optional[IRRResult]:
    """Newton-Raphson phase. Returns None when the bisection fallback is needed."""
    rate = guess

    for iteration in range(1, max_iterations + 1):
        npv, dnpv = _npv_and_derivative(amounts, rate)

        if abs(npv) < tolerance:
            return IRRResult(
                rate=rate,
                status=IRRStatus.converged,
                residual=npv,
                iterations=iteration,
                method="newton",
            )

        if abs(dnpv) < tolerance:
            logger.debug(f"Newton derivative too small at rate {rate}")
            return None

        new_rate = rate - npv / dnpv

        if not np.isfinite(new_rate) or new_rate < lower_bound or new_rate > upper_bound:
            logger.debug(f"Newton step left [{lower_bound}, {upper_bound}]: {new_rate}")
            return None

        if abs(new_rate - rate) < tolerance:
            return IRRResult(
                rate=new_rate,
                status=IRRStatus.converged,
                residual=calculate_npv(amounts, new_rate),
                iterations=iteration,
                method="newton",
            )

        rate = new_rate

    logger.debug(f"Newton did not converge in {max_iterations} iterations")
    return None


def _bisection(
    amounts: np.ndarray,
    tolerance: float,
    max_iterations: int,
    lower: float,
    upper: float,
) -> IRRResult:
    """Bisection fallback. Always returns a rate; never signals failure."""
    # NPV falls as the rate rises, so a bracket needs NPV(lower) >= 0 >= NPV(upper)
    bracketed = (
        calculate_npv(amounts, lower) >= 0 and calculate_npv(amounts, upper) <= 0
    )
    bracket_status = IRRStatus.converged if bracketed else IRRStatus.best_effort

    for iteration in range(1, max_iterations + 1):
        mid = (lower + upper) / 2
        npv = calculate_npv(amounts, mid)

        if abs(npv) < tolerance:
            return IRRResult(
                rate=mid,
                status=IRRStatus.converged,
                residual=npv,
                iterations=iteration,
                method="bisection",
            )

        if npv > 0:
            lower = mid
        else:
            upper = mid

        if upper - lower < tolerance:
            return IRRResult(
                rate=mid,
                status=bracket_status,
                residual=npv,
                iterations=iteration,
                method="bisection",
            )

    rate = (lower + upper) / 2
    return IRRResult(
        rate=rate,
        status=IRRStatus.best_effort,
        residual=calculate_npv(amounts, rate),
        iterations=max_iterations,
        method="bisection",
    )


def solve_irr(
    cash_flows: CashFlows,
    guess: float = DEFAULT_GUESS,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
    lower_bound: float = LOWER_BOUND,
    upper_bound: float = UPPER_BOUND,
    bisection_upper: float = BISECTION_UPPER,
) -> IRRResult:
    """
    Solve for IRR (Internal Rate of Return) of a periodic cash-flow series.

    Tries Newton-Raphson from the guess first. When the tangent is too flat
    or a step leaves [lower_bound, upper_bound], falls back to bisection over
    [lower_bound, bisection_upper].

    Args:
        cash_flows: Periodic cash flows, amounts or CashFlowPoint objects
        guess: Initial guess for rate (default 0.1 = 10%)
        tolerance: NPV and step-size tolerance
        max_iterations: Iteration cap for each phase

    Returns:
        IRRResult with the rate and how it was reached
    """
    amounts = _amounts(cash_flows)

    if amounts.size < 2:
        return IRRResult(rate=0.0, status=IRRStatus.insufficient_data)

    has_sign_change = np.any(amounts > 0) and np.any(amounts < 0)
    if not has_sign_change:
        if amounts.sum() >= 0:
            return IRRResult(rate=0.0, status=IRRStatus.non_profitable)
        return IRRResult(rate=TOTAL_LOSS_RATE, status=IRRStatus.total_loss)

    result = _newton(
        amounts, guess, tolerance, max_iterations, lower_bound, upper_bound
    )
    if result is not None:
        return result

    logger.debug("Falling back to bisection for IRR")
    return _bisection(amounts, tolerance, max_iterations, lower_bound, bisection_upper)


def calculate_irr(cash_flows: CashFlows, guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR as a plain rate.

    Returns 0 for fewer than 2 flows or a non-losing series with no sign
    change, and -0.99 for a series with no sign change that loses money.
    """
    return solve_irr(cash_flows, guess=guess).rate


def calculate_cash_on_cash_return(
    noi: float, annual_debt_service: float, initial_cash_investment: float
) -> float:
    """Cash-on-Cash = (NOI - debt service) / initial cash (0 when no cash in)."""
    if initial_cash_investment == 0:
        return 0.0
    return (noi - annual_debt_service) / initial_cash_investment


def calculate_multiple(cash_flows: CashFlows) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return), 0 when nothing was invested
    """
    amounts = _amounts(cash_flows)
    total_inflows = amounts[amounts > 0].sum()
    total_outflows = abs(amounts[amounts < 0].sum())

    if total_outflows == 0:
        return 0.0

    return float(total_inflows / total_outflows)


def calculate_profit(cash_flows: CashFlows) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return float(_amounts(cash_flows).sum())


def present_value(future_value: float, rate: float, periods: float) -> float:
    """PV = FV / (1 + r)^n"""
    return future_value / ((1 + rate) ** periods)


def future_value(present_value: float, rate: float, periods: float) -> float:
    """FV = PV * (1 + r)^n"""
    return present_value * ((1 + rate) ** periods)
