from __future__ import annotations

"""Central rate cache service.

Purpose:
    Keep the last INR -> USDT quote for a configurable TTL
    (settings.rates_cache_ttl_seconds) so every converter request does not
    hit the upstream price API.

Design:
    - Wraps one RateProvider selected via settings.exchange_rate_provider.
    - Live quotes live for the full TTL; fallback quotes only for
      settings.rates_fallback_ttl_seconds so a recovered upstream is noticed.
    - refresh() bypasses the cache (the converter page's refresh action).
"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from enkrypt.core.config import Settings
from .base import RateProvider, RateQuote
from .providers import make_rate_provider

logger = logging.getLogger("enkrypt.rates")


class RateCacheService:
    def __init__(self, provider: RateProvider, ttl_seconds: int, fallback_ttl_seconds: int):
        self._provider = provider
        self._ttl = timedelta(seconds=ttl_seconds)
        self._fallback_ttl = timedelta(seconds=fallback_ttl_seconds)
        self._quote: Optional[RateQuote] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateCacheService":
        return cls(
            make_rate_provider(settings),
            ttl_seconds=settings.rates_cache_ttl_seconds,
            fallback_ttl_seconds=settings.rates_fallback_ttl_seconds,
        )

    # Internal --------------------------------------------------
    def _is_valid(self, quote: RateQuote) -> bool:
        ttl = self._fallback_ttl if quote.fallback else self._ttl
        return datetime.now(timezone.utc) - quote.fetched_at < ttl

    # Public API -----------------------------------------------
    def get_quote(self) -> RateQuote:
        with self._lock:
            if self._quote is not None and self._is_valid(self._quote):
                return self._quote
        return self.refresh()

    def refresh(self) -> RateQuote:
        quote = self._provider.get_quote()
        with self._lock:
            self._quote = quote
        logger.info(
            "rate refreshed source=%s rate=%.8f fallback=%s",
            quote.source,
            quote.rate,
            quote.fallback,
        )
        return quote
