"""
Financial Calculation Engine

Loan amortization and investment valuation. Every function here is pure
apart from the awaited price lookups, which are injected by the caller.
"""

from fintrack.calculations import errors, loans, rounding, valuation

__all__ = ["errors", "loans", "rounding", "valuation"]
