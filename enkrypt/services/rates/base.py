from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: how many USDT does 1 INR buy right now.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RateQuote:
    rate: float  # USDT per 1 INR
    source: str
    fallback: bool
    fetched_at: datetime


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def get_quote(self) -> RateQuote:
        """Return the current INR -> USDT quote; never raises for upstream failures."""
        raise NotImplementedError
