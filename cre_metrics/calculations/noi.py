"""
Net Operating Income and Price Ratios

NOI, Cap Rate and Gross Rent Multiplier. Every function is total: zero
denominators return 0 instead of raising.
"""


def calculate_effective_rent(annual_rent: float, vacancy_rate: float) -> float:
    """Annual rent after vacancy loss."""
    return annual_rent * (1 - vacancy_rate)


def calculate_noi(
    annual_rent: float, operating_expenses: float, vacancy_rate: float = 0.0
) -> float:
    """
    Calculate Net Operating Income.

    NOI = annual rent * (1 - vacancy rate) - operating expenses

    Args:
        annual_rent: Gross scheduled annual rent
        operating_expenses: Annual operating expenses
        vacancy_rate: Vacancy as decimal (e.g., 0.05 for 5%)

    Returns:
        NOI, floored at zero
    """
    noi = calculate_effective_rent(annual_rent, vacancy_rate) - operating_expenses
    return max(0.0, noi)


def calculate_cap_rate(noi: float, purchase_price: float) -> float:
    """Cap Rate = NOI / purchase price (0 when price is 0)."""
    if purchase_price == 0:
        return 0.0
    return noi / purchase_price


def calculate_grm(purchase_price: float, annual_rent: float) -> float:
    """Gross Rent Multiplier = purchase price / annual rent (0 when rent is 0)."""
    if annual_rent == 0:
        return 0.0
    return purchase_price / annual_rent


def calculate_projected_noi(
    effective_rent: float,
    operating_expenses: float,
    year: int,
    rent_growth_rate: float = 0.0,
    expense_growth_rate: float = 0.0,
) -> float:
    """
    Project NOI for a future year, growing rent and expenses separately.

    Args:
        effective_rent: Year-0 rent after vacancy
        operating_expenses: Year-0 operating expenses
        year: Years from acquisition
        rent_growth_rate: Annual rent growth as decimal
        expense_growth_rate: Annual expense growth as decimal

    Returns:
        Projected NOI, floored at zero
    """
    projected_rent = effective_rent * (1 + rent_growth_rate) ** year
    projected_expenses = operating_expenses * (1 + expense_growth_rate) ** year
    return max(0.0, projected_rent - projected_expenses)
