from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from enkrypt.models.rates import ConversionEnvelope, ExchangeRateEnvelope
from enkrypt.services.rates.cache_service import RateCacheService
from enkrypt.services.rates.conversion import convert, rate_text

"""Rates router: live INR -> USDT rate and server-side conversion.

Upstream failures never surface as errors here; the quote is flagged
`fallback` and carries the configured constant instead.
"""

router = APIRouter(prefix="/api", tags=["rates"])


def get_rate_service(request: Request) -> RateCacheService:
    return request.app.state.rates


@router.get(
    "/exchange-rate",
    response_model=ExchangeRateEnvelope,
    summary="Current INR -> USDT rate",
)
def exchange_rate(
    refresh: bool = Query(False, description="Bypass the cached quote"),
    rates: RateCacheService = Depends(get_rate_service),
):
    quote = rates.refresh() if refresh else rates.get_quote()
    return ExchangeRateEnvelope(
        rate=quote.rate,
        timestamp=quote.fetched_at,
        source=quote.source,
        fallback=quote.fallback,
    )


@router.get(
    "/convert",
    response_model=ConversionEnvelope,
    summary="Convert an INR amount to USDT at the current rate",
)
def convert_amount(
    amount: Optional[str] = Query(None, description="INR amount; free-form input"),
    rates: RateCacheService = Depends(get_rate_service),
):
    quote = rates.get_quote()
    result = convert(amount, quote.rate)
    return ConversionEnvelope(
        inr_amount=result.inr_amount,
        usdt_amount=result.usdt_amount,
        display=result.display,
        rate=quote.rate,
        rate_text=rate_text(quote.rate),
        fallback=quote.fallback,
    )
