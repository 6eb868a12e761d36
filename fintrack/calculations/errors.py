"""
Error taxonomy for the calculation engine.

All engine errors derive from ValueError so API routes can map them to
client errors the same way they map any other bad input.
"""


class CalculationError(ValueError):
    """Base class for engine errors."""


class InvalidInput(CalculationError):
    """Arguments violate the engine's input constraints."""


class OutOfRange(CalculationError):
    """A loan progress update falls outside [0, tenure]."""


class PriceUnavailable(CalculationError):
    """
    No spot price could be obtained for a holding.

    Raised by price sources only. The valuation engine always converts it
    to the fallback price, so it never reaches an API caller.
    """
