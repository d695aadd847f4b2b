"""
Shared fixtures for the calculation engine tests.
"""

import pytest

from cre_metrics.config import Settings, get_settings
from cre_metrics.models import CalculatorInputs


def pytest_configure(config):
    """Register the integration marker used by the calculator suite."""
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Re-read settings for every test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with library defaults only."""
    return Settings()


@pytest.fixture
def acceptance_inputs():
    """$1.2M deal, 65% LTV at 6.5% over 30 years, 5-year hold."""
    return CalculatorInputs(
        purchase_price=1200000,
        annual_rent=108000,
        operating_expenses=24000,
        vacancy_rate=0,
        loan_amount=780000,
        interest_rate=0.065,
        amortization_years=30,
        interest_only_years=0,
        closing_costs=0.03,
        hold_years=5,
        rent_growth_rate=0.02,
        expense_growth_rate=0.02,
        exit_cap_rate=0.0725,
        selling_costs=0.03,
    )
