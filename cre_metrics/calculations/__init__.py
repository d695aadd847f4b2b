"""
Financial Calculation Engine

Core calculation modules for commercial real estate investment analysis.
Every function is pure: no I/O and no state kept between calls.
"""

from cre_metrics.calculations import noi, amortization, cashflow, irr

__all__ = ["noi", "amortization", "cashflow", "irr"]
