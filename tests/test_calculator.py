"""
Tests for the investment metrics calculator and settings.
"""

import math
import pytest
from concurrent.futures import ThreadPoolExecutor
from pydantic import ValidationError

from cre_metrics import (
    CalculatorInputs,
    InvalidInputError,
    IRRStatus,
    calculate_investment_metrics,
    quick_calculation,
    safe_calculate,
    validate_inputs,
)
from cre_metrics.calculations.irr import calculate_npv
from cre_metrics.config import Settings, get_settings


class TestInvestmentMetrics:
    """Full calculator pipeline on the reference deal."""

    @pytest.mark.integration
    def test_acceptance_case_ratios(self, acceptance_inputs):
        """Ratios match the reference deal."""
        result = calculate_investment_metrics(acceptance_inputs)

        assert result.noi == 84000
        assert result.cap_rate == pytest.approx(0.07)
        assert abs(result.grm - 11.111) < 0.001
        assert abs(result.debt_service - 59161.57) < 0.5
        assert abs(result.dscr - 1.42) < 0.005
        assert result.ltv == pytest.approx(0.65)
        assert abs(result.cash_on_cash_return - 0.0545) < 0.0005
        assert result.initial_cash_investment == pytest.approx(456000)

    @pytest.mark.integration
    def test_acceptance_case_irr(self, acceptance_inputs):
        """IRR zeroes NPV of the projected series."""
        result = calculate_investment_metrics(acceptance_inputs)

        # Sale proceeds arrive without repaying the loan, so returns run high
        assert abs(result.irr - 0.2669) < 0.002
        assert result.irr_status == IRRStatus.converged
        npv = calculate_npv(result.cash_flows, result.irr)
        assert abs(npv) < 1.0

    def test_cash_flow_series(self, acceptance_inputs):
        result = calculate_investment_metrics(acceptance_inputs)

        assert [cf.year for cf in result.cash_flows] == [0, 1, 2, 3, 4, 5]
        assert result.cash_flows[0].cash_flow == pytest.approx(-456000)
        assert abs(result.cash_flows[1].cash_flow - 26518.43) < 0.5
        assert result.cash_flows[-1].cash_flow > 1_000_000

    def test_multiple_and_profit(self, acceptance_inputs):
        result = calculate_investment_metrics(acceptance_inputs)

        inflows = sum(cf.cash_flow for cf in result.cash_flows[1:])
        assert result.equity_multiple == pytest.approx(
            inflows / result.initial_cash_investment
        )
        assert result.total_profit == pytest.approx(
            inflows - result.initial_cash_investment
        )

    def test_default_selling_costs(self, acceptance_inputs):
        """Unset selling costs default to 3%."""
        defaulted = acceptance_inputs.model_copy(update={"selling_costs": None})
        assert (
            calculate_investment_metrics(defaulted).cash_flows
            == calculate_investment_metrics(acceptance_inputs).cash_flows
        )

    def test_default_growth_rates(self, acceptance_inputs):
        """Unset rent growth holds NOI flat."""
        flat = acceptance_inputs.model_copy(
            update={"rent_growth_rate": None, "expense_growth_rate": None}
        )
        result = calculate_investment_metrics(flat)
        assert result.cash_flows[1].cash_flow == pytest.approx(
            result.cash_flows[2].cash_flow
        )

    def test_settings_override_defaults(self, acceptance_inputs):
        defaulted = acceptance_inputs.model_copy(update={"selling_costs": None})
        base = calculate_investment_metrics(defaulted, Settings())
        costly = calculate_investment_metrics(
            defaulted, Settings(default_selling_costs=0.10)
        )
        assert costly.cash_flows[-1].cash_flow < base.cash_flows[-1].cash_flow
        assert costly.irr < base.irr

    def test_all_cash_purchase(self, acceptance_inputs):
        """No loan: no debt service and infinite coverage."""
        inputs = acceptance_inputs.model_copy(update={"loan_amount": 0})
        result = calculate_investment_metrics(inputs)

        assert result.debt_service == 0
        assert math.isinf(result.dscr)
        assert result.ltv == 0
        assert result.initial_cash_investment == pytest.approx(1236000)

    def test_interest_only_loan(self, acceptance_inputs):
        inputs = acceptance_inputs.model_copy(
            update={"interest_only_years": 30}
        )
        result = calculate_investment_metrics(inputs)
        assert result.debt_service == 780000 * 0.065

    def test_zero_hold_clamped(self, acceptance_inputs):
        inputs = acceptance_inputs.model_copy(update={"hold_years": 0})
        result = calculate_investment_metrics(inputs)
        assert [cf.year for cf in result.cash_flows] == [0, 1]

    def test_non_profitable_deal(self, acceptance_inputs):
        """Expenses above rent with no sale never recoup the equity."""
        inputs = acceptance_inputs.model_copy(
            update={"operating_expenses": 200000, "exit_cap_rate": None}
        )
        result = calculate_investment_metrics(inputs)
        assert result.noi == 0
        assert result.irr == -0.99
        assert result.irr_status == IRRStatus.total_loss

    def test_result_is_immutable(self, acceptance_inputs):
        result = calculate_investment_metrics(acceptance_inputs)
        with pytest.raises(ValidationError):
            result.irr = 0.5

    def test_concurrent_calculations(self, acceptance_inputs):
        expected = calculate_investment_metrics(acceptance_inputs)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(
                pool.map(calculate_investment_metrics, [acceptance_inputs] * 16)
            )
        assert all(r == expected for r in results)


class TestValidation:
    """Test caller-side input validation."""

    def test_valid_inputs(self, acceptance_inputs):
        validate_inputs(acceptance_inputs)

    def test_invalid_inputs_collected(self, acceptance_inputs):
        inputs = acceptance_inputs.model_copy(
            update={
                "purchase_price": 0,
                "annual_rent": -1,
                "interest_rate": 6.5,
                "amortization_years": 0,
            }
        )
        with pytest.raises(InvalidInputError) as exc_info:
            validate_inputs(inputs)

        assert len(exc_info.value.errors) == 4
        assert "Purchase price" in str(exc_info.value)

    def test_invalid_input_is_value_error(self, acceptance_inputs):
        inputs = acceptance_inputs.model_copy(update={"loan_amount": -5})
        with pytest.raises(ValueError):
            validate_inputs(inputs)

    def test_safe_calculate_skips_invalid(self, acceptance_inputs):
        inputs = acceptance_inputs.model_copy(update={"operating_expenses": -1})
        assert safe_calculate(inputs) is None

    def test_safe_calculate_valid(self, acceptance_inputs):
        result = safe_calculate(acceptance_inputs)
        assert result is not None
        assert result.noi == 84000

    def test_wrong_types_rejected(self, acceptance_inputs):
        fields = acceptance_inputs.model_dump()
        fields["purchase_price"] = "a lot"
        with pytest.raises(ValidationError):
            CalculatorInputs(**fields)

    @pytest.mark.parametrize(
        "field",
        [
            "vacancy_rate",
            "loan_amount",
            "interest_rate",
            "amortization_years",
            "hold_years",
        ],
    )
    def test_required_fields(self, acceptance_inputs, field):
        """Deal terms have no invented defaults."""
        fields = acceptance_inputs.model_dump()
        del fields[field]
        with pytest.raises(ValidationError) as exc_info:
            CalculatorInputs(**fields)
        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_optional_fields(self, acceptance_inputs):
        fields = acceptance_inputs.model_dump()
        for field in [
            "interest_only_years",
            "rent_growth_rate",
            "expense_growth_rate",
            "exit_cap_rate",
            "selling_costs",
        ]:
            del fields[field]
        inputs = CalculatorInputs(**fields)
        assert inputs.selling_costs is None
        assert inputs.interest_only_years is None


class TestQuickCalculation:
    """Test the NOI/Cap Rate/GRM shortcut."""

    def test_quick_calculation(self):
        result = quick_calculation(1200000, 108000, 24000)
        assert result["noi"] == 84000
        assert result["cap_rate"] == pytest.approx(0.07)
        assert abs(result["grm"] - 11.111) < 0.001


class TestSettings:
    """Test engine settings."""

    def test_defaults(self, settings):
        assert settings.default_selling_costs == 0.03
        assert settings.irr_guess == 0.1
        assert settings.irr_tolerance == 1e-4
        assert settings.irr_max_iterations == 100

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CRE_METRICS_DEFAULT_SELLING_COSTS", "0.05")
        monkeypatch.setenv("CRE_METRICS_IRR_MAX_ITERATIONS", "50")
        settings = get_settings()
        assert settings.default_selling_costs == 0.05
        assert settings.irr_max_iterations == 50

    def test_settings_cached(self):
        assert get_settings() is get_settings()
