"""
Investment Valuation

Values holdings against externally supplied spot prices and aggregates
them into portfolio totals.

Price lookups are advisory: a holding whose price cannot be fetched is
valued at its own cost basis (zero profit) instead of failing the read.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Mapping, Protocol

from fintrack.calculations.errors import InvalidInput, PriceUnavailable
from fintrack.calculations.rounding import (
    is_number,
    percent_of,
    round_currency,
    round_percent,
)

logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    """Capability interface for a spot-price feed."""

    async def get_price(self, symbol: str) -> float:
        """Return the current unit price for symbol or raise PriceUnavailable."""
        ...


@dataclass
class PriceQuote:
    price: float
    is_fallback: bool = False


@dataclass
class Valuation:
    current_value: float
    profit: float
    profit_percent: float


@dataclass
class HoldingValuation:
    """A holding together with its resolved price and valuation."""

    holding: object
    quote: PriceQuote
    valuation: Valuation

    @property
    def invested_amount(self) -> float:
        return self.holding.invested_amount


@dataclass
class PortfolioSummary:
    total_invested: float
    total_value: float
    total_profit: float
    total_profit_percent: float


def validate_holding(quantity: float, invested_amount: float) -> None:
    """
    Check a holding's quantity and cost basis.

    Raises:
        InvalidInput: If either value is not a positive number
    """
    if not is_number(quantity) or quantity <= 0:
        raise InvalidInput("Quantity must be positive")
    if not is_number(invested_amount) or invested_amount <= 0:
        raise InvalidInput("Invested amount must be positive")


def fallback_price(holding) -> float:
    """Unit cost basis of a holding, used when no spot price is available."""
    return holding.invested_amount / holding.quantity


def compute_valuation(holding, current_price: float) -> Valuation:
    """
    Value a holding at the given unit price.

    Args:
        holding: Object with quantity and invested_amount attributes
        current_price: Spot price per unit

    Returns:
        Valuation with current value, profit and profit percent

    Raises:
        InvalidInput: If quantity or invested amount is not positive
    """
    validate_holding(holding.quantity, holding.invested_amount)

    # Round once at the end so the cost-basis price nets to exactly zero
    current_value = current_price * holding.quantity
    profit = current_value - holding.invested_amount

    return Valuation(
        current_value=round_currency(current_value),
        profit=round_currency(profit),
        profit_percent=round_percent(percent_of(profit, holding.invested_amount)),
    )


async def resolve_current_price(
    holding, price_sources: Mapping[str, PriceSource]
) -> PriceQuote:
    """
    Fetch the spot price for a holding, falling back to its cost basis.

    The source is chosen by the holding's type (stock or crypto). Any
    failure, including an unconfigured type, yields the fallback price.
    """
    try:
        source = price_sources.get(holding.type)
        if source is None:
            raise PriceUnavailable(f"No price source configured for '{holding.type}'")
        price = await source.get_price(holding.asset)
        return PriceQuote(price=price)
    except PriceUnavailable as e:
        logger.warning(f"Using cost basis for {holding.asset}: {e}")
    except Exception:
        logger.exception(f"Unexpected price lookup error for {holding.asset}, using cost basis")

    return PriceQuote(price=fallback_price(holding), is_fallback=True)


async def value_holding(
    holding, price_sources: Mapping[str, PriceSource]
) -> HoldingValuation:
    """Resolve the price of one holding and value it."""
    validate_holding(holding.quantity, holding.invested_amount)
    quote = await resolve_current_price(holding, price_sources)
    return HoldingValuation(
        holding=holding,
        quote=quote,
        valuation=compute_valuation(holding, quote.price),
    )


async def value_holdings(
    holdings: List, price_sources: Mapping[str, PriceSource]
) -> List[HoldingValuation]:
    """Value all holdings, fetching their prices concurrently."""
    return await asyncio.gather(*(value_holding(h, price_sources) for h in holdings))


def summarize_portfolio(valuations: List[HoldingValuation]) -> PortfolioSummary:
    """
    Aggregate holding valuations into portfolio totals.

    An empty portfolio reports zero for every total.
    """
    total_invested = sum(v.invested_amount for v in valuations)
    total_value = sum(v.valuation.current_value for v in valuations)
    total_profit = total_value - total_invested

    return PortfolioSummary(
        total_invested=round_currency(total_invested),
        total_value=round_currency(total_value),
        total_profit=round_currency(total_profit),
        total_profit_percent=round_percent(percent_of(total_profit, total_invested)),
    )
