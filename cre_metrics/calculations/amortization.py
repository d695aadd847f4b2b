"""
Loan Amortization and Debt Service Calculations

Implements loan payment, blended annual debt service and amortization
schedule calculations, plus the debt ratios (DSCR, LTV) built on them.
"""

import logging
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: float
) -> float:
    """
    Level monthly payment that retires the principal over a month count.

    Zero or negative principal or term gives 0; a zero rate spreads the
    principal evenly across the months.
    """
    if principal <= 0 or amortization_months <= 0:
        return 0.0

    monthly_rate = annual_rate / MONTHS_IN_YEAR
    if monthly_rate == 0:
        return principal / amortization_months

    growth = (1 + monthly_rate) ** amortization_months
    return principal * monthly_rate * growth / (growth - 1)


def calculate_monthly_payment(
    loan_amount: float, interest_rate: float, amortization_years: float
) -> float:
    """Level monthly payment for a loan amortizing over whole years."""
    return calculate_payment(
        loan_amount, interest_rate, amortization_years * MONTHS_IN_YEAR
    )


def calculate_interest_only_payment(loan_amount: float, interest_rate: float) -> float:
    """Monthly payment during an interest-only period."""
    return loan_amount * interest_rate / MONTHS_IN_YEAR


def _clamp_interest_only_years(
    interest_only_years: Optional[float], amortization_years: float
) -> float:
    if not interest_only_years or interest_only_years <= 0:
        return 0.0
    if interest_only_years > amortization_years:
        logger.warning(
            f"Interest-only period of {interest_only_years} years exceeds "
            f"amortization of {amortization_years} years; clamping"
        )
        return amortization_years
    return interest_only_years


def calculate_annual_debt_service(
    loan_amount: float,
    interest_rate: float,
    amortization_years: float,
    interest_only_years: Optional[float] = 0.0,
) -> float:
    """
    Calculate annual debt service.

    With an interest-only period the result is the average annual payment
    over the whole amortization term: IO payments for the IO years, then the
    original loan amount amortized over the remaining years.

    Args:
        loan_amount: Loan principal amount
        interest_rate: Annual interest rate as decimal
        amortization_years: Amortization term in years
        interest_only_years: Leading interest-only years (clamped to the term)

    Returns:
        Annual debt service
    """
    if amortization_years <= 0:
        return 0.0

    # Zero rate: straight-line principal
    if interest_rate == 0:
        return max(0.0, loan_amount) / amortization_years

    io_years = _clamp_interest_only_years(interest_only_years, amortization_years)

    if io_years >= amortization_years:
        return loan_amount * interest_rate

    if io_years > 0:
        monthly_io = calculate_interest_only_payment(loan_amount, interest_rate)
        total_debt_service = monthly_io * MONTHS_IN_YEAR * io_years

        remaining_years = amortization_years - io_years
        if remaining_years > 0:
            monthly_amort = calculate_monthly_payment(
                loan_amount, interest_rate, remaining_years
            )
            total_debt_service += monthly_amort * MONTHS_IN_YEAR * remaining_years

        return total_debt_service / amortization_years

    monthly_payment = calculate_monthly_payment(
        loan_amount, interest_rate, amortization_years
    )
    return monthly_payment * MONTHS_IN_YEAR


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    monthly_rate = annual_rate / MONTHS_IN_YEAR
    payment = calculate_payment(principal, annual_rate, amortization_months)

    if monthly_rate == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * ((1 + monthly_rate) ** payments_completed) - payment * (
        ((1 + monthly_rate) ** payments_completed - 1) / monthly_rate
    )

    return max(0.0, balance)


def generate_amortization_schedule(
    loan_amount: float,
    interest_rate: float,
    amortization_years: float,
    interest_only_years: Optional[float] = 0.0,
    start_date: Optional[date] = None,
    reamortize_after_io: bool = False,
) -> List[Dict]:
    """
    Generate a full monthly amortization schedule.

    The schedule covers amortization_years * 12 months. Interest-only months
    come first and leave the balance unchanged. Amortizing months use the
    level payment over the full term unless reamortize_after_io is set, in
    which case the balance is re-amortized over the months left after the
    interest-only period.

    Args:
        loan_amount: Loan principal amount
        interest_rate: Annual interest rate as decimal
        amortization_years: Amortization term in years
        interest_only_years: Leading interest-only years (clamped to the term)
        start_date: Date of first payment; adds an ISO "date" to each row
        reamortize_after_io: Re-amortize over the post-IO months

    Returns:
        List of amortization rows
    """
    schedule = []
    balance = float(loan_amount)
    monthly_rate = interest_rate / MONTHS_IN_YEAR
    total_months = int(round(amortization_years * MONTHS_IN_YEAR))

    io_years = _clamp_interest_only_years(interest_only_years, amortization_years)
    io_months = int(round(io_years * MONTHS_IN_YEAR))

    io_payment = balance * monthly_rate
    if reamortize_after_io:
        payment = calculate_payment(balance, interest_rate, total_months - io_months)
    else:
        payment = calculate_payment(balance, interest_rate, total_months)

    for month in range(1, total_months + 1):
        beginning_balance = balance

        if month <= io_months:
            # Interest-only period
            row_payment = io_payment
            interest = io_payment
            principal_pmt = 0.0
        else:
            row_payment = payment
            interest = balance * monthly_rate
            principal_pmt = payment - interest
            balance = max(0.0, balance - principal_pmt)

        row = {
            "month": month,
            "payment": row_payment,
            "principal": principal_pmt,
            "interest": interest,
            "beginning_balance": beginning_balance,
            "balance": balance,
        }
        if start_date is not None:
            row["date"] = (start_date + relativedelta(months=month - 1)).isoformat()

        schedule.append(row)

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


def calculate_dscr(noi: float, debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period

    Returns:
        DSCR ratio
    """
    if debt_service == 0:
        return float("inf")
    return noi / debt_service


def calculate_ltv(loan_amount: float, purchase_price: float) -> float:
    """Loan-to-Value = loan amount / purchase price (0 when price is 0)."""
    if purchase_price == 0:
        return 0.0
    return loan_amount / purchase_price
