from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from enkrypt.services.money import format_amount, round_asset

"""INR -> USDT conversion for display.

Responsibilities:
    - Parse loosely typed user input (form strings, JSON numbers).
    - Map unusable input to the zero placeholder and a missing rate to the
      loading placeholder instead of raising.
    - Return an immutable result carrying both the number and its display text.
"""

ZERO_PLACEHOLDER = "0.00"
LOADING_PLACEHOLDER = "Loading..."


@dataclass(frozen=True)
class ConversionResult:
    inr_amount: Optional[float]
    usdt_amount: Optional[float]
    rate: float
    display: str


def parse_amount(raw: Any) -> Optional[float]:
    """Return a finite non-negative float, or None when the input is unusable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value != value or value in (float("inf"), float("-inf")) or value < 0:
        return None
    return value


def convert(raw_amount: Any, rate: float) -> ConversionResult:
    amount = parse_amount(raw_amount)
    if not amount:
        return ConversionResult(inr_amount=amount, usdt_amount=None, rate=rate, display=ZERO_PLACEHOLDER)
    if rate <= 0:
        return ConversionResult(inr_amount=amount, usdt_amount=None, rate=rate, display=LOADING_PLACEHOLDER)
    usdt = amount * rate  # USDT is pegged 1:1 to USD
    return ConversionResult(
        inr_amount=amount,
        usdt_amount=round_asset(usdt),
        rate=rate,
        display=format_amount(usdt),
    )


def rate_text(rate: float) -> str:
    return f"1 INR = ₮{format_amount(rate)} USDT"
