"""
Value objects passed into and returned from the calculation engine.

All rates are decimal fractions (0.065 for 6.5%), never percentages.
"""

import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class LoanParams(BaseModel):
    """Loan terms consumed by the debt service engine."""

    model_config = ConfigDict(frozen=True)

    loan_amount: float
    interest_rate: float  # Annual rate
    amortization_years: float
    interest_only_years: float = 0.0


class CashFlowPoint(BaseModel):
    """One year of the projected cash-flow series."""

    model_config = ConfigDict(frozen=True)

    year: int
    cash_flow: float


class ProjectionParams(BaseModel):
    """Assumptions used to build the cash-flow series for IRR."""

    model_config = ConfigDict(frozen=True)

    initial_investment: float  # Magnitude invested at year 0
    annual_noi: float
    debt_service: float
    hold_years: int
    rent_growth_rate: float = 0.0
    expense_growth_rate: float = 0.0  # Carried but not applied by the projector
    exit_cap_rate: Optional[float] = None
    selling_costs: float = 0.0


class CalculatorInputs(BaseModel):
    """Full input bundle for the investment metrics calculator."""

    model_config = ConfigDict(frozen=True)

    # Acquisition
    purchase_price: float
    closing_costs: float  # Fraction of purchase price

    # Operations
    annual_rent: float
    operating_expenses: float
    vacancy_rate: float

    # Financing
    loan_amount: float
    interest_rate: float
    amortization_years: float
    interest_only_years: Optional[float] = None

    # Hold and exit
    hold_years: int
    rent_growth_rate: Optional[float] = None
    expense_growth_rate: Optional[float] = None
    exit_cap_rate: Optional[float] = None
    selling_costs: Optional[float] = None

    def loan_params(self) -> LoanParams:
        return LoanParams(
            loan_amount=self.loan_amount,
            interest_rate=self.interest_rate,
            amortization_years=self.amortization_years,
            interest_only_years=self.interest_only_years or 0.0,
        )

    def projection_params(
        self,
        initial_investment: float,
        annual_noi: float,
        debt_service: float,
        default_rent_growth_rate: float = 0.0,
        default_expense_growth_rate: float = 0.0,
        default_selling_costs: float = 0.03,
    ) -> ProjectionParams:
        """Build projection assumptions, filling unset rates with defaults."""
        rent_growth = self.rent_growth_rate
        expense_growth = self.expense_growth_rate
        selling_costs = self.selling_costs

        return ProjectionParams(
            initial_investment=initial_investment,
            annual_noi=annual_noi,
            debt_service=debt_service,
            hold_years=self.hold_years,
            rent_growth_rate=(
                default_rent_growth_rate if rent_growth is None else rent_growth
            ),
            expense_growth_rate=(
                default_expense_growth_rate
                if expense_growth is None
                else expense_growth
            ),
            exit_cap_rate=self.exit_cap_rate,
            selling_costs=(
                default_selling_costs if selling_costs is None else selling_costs
            ),
        )


class IRRStatus(str, enum.Enum):
    """How the IRR solver arrived at its rate."""

    converged = "converged"
    best_effort = "best_effort"
    non_profitable = "non_profitable"
    total_loss = "total_loss"
    insufficient_data = "insufficient_data"


class IRRResult(BaseModel):
    """Outcome of an IRR solve."""

    model_config = ConfigDict(frozen=True)

    rate: float
    status: IRRStatus
    residual: float = 0.0  # NPV at the returned rate
    iterations: int = 0
    method: str = "none"

    @property
    def converged(self) -> bool:
        return self.status == IRRStatus.converged


class InvestmentMetrics(BaseModel):
    """Calculated investment metrics for one input bundle."""

    model_config = ConfigDict(frozen=True)

    noi: float
    cap_rate: float
    grm: float
    debt_service: float
    dscr: float  # +inf when there is no debt service
    ltv: float
    cash_on_cash_return: float
    irr: float
    irr_status: IRRStatus
    equity_multiple: float
    total_profit: float
    initial_cash_investment: float
    cash_flows: List[CashFlowPoint]
