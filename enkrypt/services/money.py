"""Money / rounding helpers.

Centralized so the converter, the store and the payment flow use identical
rounding semantics. INR amounts carry 2 decimals; USDT amounts carry 6.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP

ASSET_DECIMALS = 6
MIN_DISPLAY_DECIMALS = 2


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_asset(value: float) -> float:
    return float(
        Decimal(str(value)).quantize(Decimal(1).scaleb(-ASSET_DECIMALS), rounding=ROUND_HALF_UP)
    )


def to_paise(rupees: float) -> int:
    return int(Decimal(str(rupees)).scaleb(2).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_amount(value: float) -> str:
    """en-US grouping with 2..6 fraction digits, e.g. 1234.5 -> '1,234.50'."""
    q = Decimal(str(value)).quantize(Decimal(1).scaleb(-ASSET_DECIMALS), rounding=ROUND_HALF_UP)
    text = f"{q:,.{ASSET_DECIMALS}f}"
    whole, frac = text.split(".")
    frac = frac.rstrip("0").ljust(MIN_DISPLAY_DECIMALS, "0")
    return f"{whole}.{frac}"
