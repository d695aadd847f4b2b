"""
Engine configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("CRE_METRICS_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Engine defaults loaded from environment variables."""

    # Projection defaults (applied when an input bundle leaves them unset)
    default_selling_costs: float = 0.03
    default_rent_growth_rate: float = 0.0
    default_expense_growth_rate: float = 0.0

    # IRR solver
    irr_guess: float = 0.1
    irr_tolerance: float = 1e-4
    irr_max_iterations: int = 100
    irr_lower_bound: float = -0.99
    irr_upper_bound: float = 10.0
    irr_bisection_upper: float = 1.0

    model_config = SettingsConfigDict(
        env_prefix="CRE_METRICS_",
        env_file=get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
