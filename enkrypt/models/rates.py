from __future__ import annotations

from datetime import datetime
from typing import Optional

from .base import Envelope


class ExchangeRateEnvelope(Envelope):
    rate: float
    timestamp: datetime
    source: str
    fallback: bool = False


class ConversionEnvelope(Envelope):
    inr_amount: Optional[float] = None
    usdt_amount: Optional[float] = None
    display: str
    rate: float
    rate_text: str
    fallback: bool = False
