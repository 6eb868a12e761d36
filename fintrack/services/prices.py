"""
Spot-price sources for investment valuation.

CoinGecko backs crypto holdings and Alpha Vantage backs stocks. Each source
raises PriceUnavailable for any failure so the valuation engine can fall
back to the holding's cost basis.
"""

import logging
import math
import time
from functools import lru_cache
from typing import AsyncGenerator, Dict, Optional, Tuple

import httpx

from fintrack.calculations.errors import PriceUnavailable
from fintrack.calculations.valuation import PriceSource
from fintrack.config import Settings, get_settings
from fintrack.db.models import InvestmentType

logger = logging.getLogger(__name__)

# Ticker -> CoinGecko coin id for the assets users most often enter by ticker.
COINGECKO_IDS = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "USDT": "tether",
    "BNB": "binancecoin",
    "SOL": "solana",
    "XRP": "ripple",
    "USDC": "usd-coin",
    "ADA": "cardano",
    "DOGE": "dogecoin",
    "DOT": "polkadot",
    "LTC": "litecoin",
    "MATIC": "matic-network",
    "AVAX": "avalanche-2",
    "LINK": "chainlink",
}


def _positive_price(symbol: str, value) -> float:
    """Parse a quoted price, rejecting missing, malformed, non-finite and non-positive values."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise PriceUnavailable(f"No price quoted for {symbol}")
    if not math.isfinite(price) or price <= 0:
        raise PriceUnavailable(f"Unusable price quoted for {symbol}: {value}")
    return price


class CoinGeckoPriceSource:
    """Crypto spot prices in USD from CoinGecko's simple price endpoint."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self.client = client
        self.base_url = base_url.rstrip("/")

    @staticmethod
    def coin_id(symbol: str) -> str:
        return COINGECKO_IDS.get(symbol.upper(), symbol.lower())

    async def get_price(self, symbol: str) -> float:
        coin_id = self.coin_id(symbol)
        try:
            response = await self.client.get(
                f"{self.base_url}/simple/price",
                params={"ids": coin_id, "vs_currencies": "usd"},
            )
            response.raise_for_status()
            value = (response.json().get(coin_id) or {}).get("usd")
        except httpx.HTTPError as e:
            raise PriceUnavailable(f"CoinGecko request failed for {symbol}: {e}") from e
        except (ValueError, AttributeError) as e:
            raise PriceUnavailable(f"Malformed CoinGecko response for {symbol}") from e

        return _positive_price(symbol, value)


class AlphaVantagePriceSource:
    """Stock quotes from Alpha Vantage's GLOBAL_QUOTE function."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: str):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def get_price(self, symbol: str) -> float:
        if not self.api_key:
            raise PriceUnavailable("Alpha Vantage API key is not configured")

        try:
            response = await self.client.get(
                f"{self.base_url}/query",
                params={
                    "function": "GLOBAL_QUOTE",
                    "symbol": symbol,
                    "apikey": self.api_key,
                },
            )
            response.raise_for_status()
            value = (response.json().get("Global Quote") or {}).get("05. price")
        except httpx.HTTPError as e:
            raise PriceUnavailable(f"Alpha Vantage request failed for {symbol}: {e}") from e
        except (ValueError, AttributeError) as e:
            raise PriceUnavailable(f"Malformed Alpha Vantage response for {symbol}") from e

        return _positive_price(symbol, value)


class PriceCache:
    """In-process TTL cache of spot prices keyed by (kind, symbol)."""

    def __init__(self, ttl_seconds: float, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[Tuple[str, str], Tuple[float, float]] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: Tuple[str, str]) -> Optional[float]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        price, stored_at = entry
        if self._expired(stored_at, self.clock()):
            del self._entries[key]
            return None
        return price

    def set(self, key: Tuple[str, str], price: float) -> None:
        now = self.clock()
        # Prune expired entries
        for stale in [k for k, (_, t) in self._entries.items() if self._expired(t, now)]:
            del self._entries[stale]
        self._entries[key] = (price, now)

    def __len__(self) -> int:
        return len(self._entries)


class CachedPriceSource:
    """Wraps a price source with a PriceCache. Failures are never cached."""

    def __init__(self, source: PriceSource, cache: PriceCache, kind: str):
        self.source = source
        self.cache = cache
        self.kind = kind

    async def get_price(self, symbol: str) -> float:
        key = (self.kind, symbol.upper())
        price = self.cache.get(key)
        if price is None:
            price = await self.source.get_price(symbol)
            self.cache.set(key, price)
        return price


@lru_cache()
def get_price_cache() -> PriceCache:
    """Process-wide price cache."""
    return PriceCache(get_settings().price_cache_ttl_seconds)


def build_price_sources(
    client: httpx.AsyncClient,
    settings: Settings,
    cache: Optional[PriceCache] = None,
) -> Dict[str, PriceSource]:
    """Map each investment type to the price source that quotes it."""
    sources: Dict[str, PriceSource] = {
        InvestmentType.crypto.value: CoinGeckoPriceSource(
            client, settings.coingecko_base_url
        ),
        InvestmentType.stock.value: AlphaVantagePriceSource(
            client, settings.alpha_vantage_base_url, settings.alpha_vantage_api_key
        ),
    }

    if cache is not None and cache.ttl_seconds > 0:
        sources = {
            kind: CachedPriceSource(source, cache, kind)
            for kind, source in sources.items()
        }

    return sources


async def get_price_sources() -> AsyncGenerator[Dict[str, PriceSource], None]:
    """FastAPI dependency: price sources sharing one HTTP client per request."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.price_fetch_timeout_seconds) as client:
        yield build_price_sources(client, settings, get_price_cache())
