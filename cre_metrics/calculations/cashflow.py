"""
Cash Flow Calculations

Builds the annual cash-flow series used for IRR: the equity outlay at year
0, levered operating cash flow each hold year, and sale proceeds in the
final year.
"""

import logging
from typing import List, Optional

from cre_metrics.models import CashFlowPoint

logger = logging.getLogger(__name__)


def calculate_growth_factor(annual_rate: float, year: int) -> float:
    """
    Calculate compound growth factor for a given year.

    Args:
        annual_rate: Annual growth rate as decimal
        year: Years from acquisition (0-based)
    """
    return (1 + annual_rate) ** year


def calculate_net_sale_proceeds(
    final_noi: float, exit_cap_rate: Optional[float], selling_costs: float
) -> float:
    """
    Calculate sale proceeds net of selling costs.

    Sale price is the final-year NOI capitalized at the exit cap rate.
    Returns 0 when no positive exit cap rate is given.
    """
    if not exit_cap_rate or exit_cap_rate <= 0:
        return 0.0
    sale_price = final_noi / exit_cap_rate
    return sale_price * (1 - selling_costs)


def build_cash_flows(
    initial_investment: float,
    annual_noi: float,
    debt_service: float,
    hold_years: int,
    rent_growth_rate: float = 0.0,
    expense_growth_rate: float = 0.0,
    exit_cap_rate: Optional[float] = None,
    selling_costs: float = 0.0,
) -> List[CashFlowPoint]:
    """
    Generate annual cash flow projections for IRR.

    NOI is grown wholesale by the rent growth rate. expense_growth_rate is
    accepted for interface compatibility and is not applied; use
    calculate_projected_noi to net rent growth against expense growth.

    Args:
        initial_investment: Equity invested at year 0 (positive magnitude)
        annual_noi: Year-0 NOI
        debt_service: Annual debt service, held flat over the hold
        hold_years: Hold period in years (values below 1 are clamped to 1)
        rent_growth_rate: Annual NOI growth as decimal
        exit_cap_rate: Cap rate used to value the property at sale
        selling_costs: Selling costs as fraction of sale price

    Returns:
        Cash flows for years 0..hold_years
    """
    if hold_years < 1:
        logger.warning(f"Hold period of {hold_years} years is below 1; clamping")
        hold_years = 1

    cash_flows = [CashFlowPoint(year=0, cash_flow=-initial_investment)]

    for year in range(1, hold_years):
        projected_noi = annual_noi * calculate_growth_factor(rent_growth_rate, year)
        cash_flows.append(
            CashFlowPoint(year=year, cash_flow=projected_noi - debt_service)
        )

    # Final year includes sale proceeds
    final_noi = annual_noi * calculate_growth_factor(rent_growth_rate, hold_years)
    final_cash_flow = final_noi - debt_service
    final_cash_flow += calculate_net_sale_proceeds(
        final_noi, exit_cap_rate, selling_costs
    )
    cash_flows.append(CashFlowPoint(year=hold_years, cash_flow=final_cash_flow))

    return cash_flows
