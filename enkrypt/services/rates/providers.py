from __future__ import annotations

"""Concrete rate providers and factory.

Both HTTP providers fetch an INR price for one unit of USDT (or USD, which
USDT is pegged to) and invert it. Any failure, including a missing or
non-positive price, degrades to the configured fallback constant.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from enkrypt.core.config import Settings
from enkrypt.services.http_client import HttpError, get_json
from .base import RateProvider, RateQuote

logger = logging.getLogger("enkrypt.rates")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, fallback_rate: float):
        self._fallback_rate = fallback_rate

    def get_quote(self) -> RateQuote:
        return RateQuote(
            rate=self._fallback_rate, source=self.name, fallback=True, fetched_at=_now()
        )


class _HttpPriceProvider(RateProvider):
    """Template for providers that read an INR price from a JSON document."""

    def __init__(self, url: str, fallback_rate: float, timeout: float):
        self._url = url
        self._fallback_rate = fallback_rate
        self._timeout = timeout

    def _extract_inr_price(self, data: Dict[str, Any]) -> Optional[float]:
        raise NotImplementedError

    def get_quote(self) -> RateQuote:
        try:
            data = get_json(self._url, timeout=self._timeout)
            price = self._extract_inr_price(data)
        except HttpError as e:
            logger.warning("rate fetch from %s failed, using fallback: %s", self.name, e)
            return self._fallback()
        if not price or price <= 0:
            logger.warning("rate payload from %s had no usable INR price", self.name)
            return self._fallback()
        return RateQuote(rate=1 / price, source=self.name, fallback=False, fetched_at=_now())

    def _fallback(self) -> RateQuote:
        return RateQuote(
            rate=self._fallback_rate, source=self.name, fallback=True, fetched_at=_now()
        )


class CoinGeckoRateProvider(_HttpPriceProvider):
    # {"tether": {"inr": 88.12}}
    name = "coingecko"

    def _extract_inr_price(self, data: Dict[str, Any]) -> Optional[float]:
        tether = data.get("tether")
        if not isinstance(tether, dict):
            return None
        return _as_float(tether.get("inr"))


class ExchangeRateApiProvider(_HttpPriceProvider):
    # {"base": "USD", "rates": {"INR": 83.2, ...}}
    name = "exchangerate-api"

    def _extract_inr_price(self, data: Dict[str, Any]) -> Optional[float]:
        rates = data.get("rates")
        if not isinstance(rates, dict):
            return None
        return _as_float(rates.get("INR"))


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


_PROVIDER_REGISTRY: Dict[str, Callable[[Settings], RateProvider]] = {
    "static": lambda s: StaticRateProvider(s.fallback_rate),
    "coingecko": lambda s: CoinGeckoRateProvider(
        s.coingecko_url, s.fallback_rate, s.http_timeout_seconds
    ),
    "exchangerate-api": lambda s: ExchangeRateApiProvider(
        s.exchangerate_api_url, s.fallback_rate, s.http_timeout_seconds
    ),
}


def make_rate_provider(settings: Settings) -> RateProvider:
    factory = _PROVIDER_REGISTRY.get(settings.exchange_rate_provider)
    if not factory:
        raise ValueError(f"Unknown rate provider kind '{settings.exchange_rate_provider}'")
    return factory(settings)
