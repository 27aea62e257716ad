"""Simulated external effects (KYC provider, payment settlement, chain transfer).

Each effect is a pluggable capability with a single async method returning a
result. The stock implementation waits a fixed delay and then draws once
against a success probability; nothing real is verified or moved. The app
keeps one instance per effect on ``app.state`` so tests can swap in
deterministic ones.
"""

from __future__ import annotations

import asyncio
import logging
import random
import secrets
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from enkrypt.core.config import Settings

logger = logging.getLogger("enkrypt.simulators")


@dataclass(frozen=True)
class SimulationResult:
    success: bool
    reference: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class Simulator(Protocol):
    async def run(self, **context: Any) -> SimulationResult: ...


def fake_tx_hash() -> str:
    return "0x" + secrets.token_hex(32)


class RandomOutcomeSimulator:
    """Sleep ``delay_seconds`` then succeed with probability ``success_probability``."""

    name = "effect"

    def __init__(
        self,
        delay_seconds: float,
        success_probability: float,
        rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= success_probability <= 1.0:
            raise ValueError("success_probability must be within [0, 1]")
        self.delay_seconds = delay_seconds
        self.success_probability = success_probability
        self._rng = rng or random.Random()

    def _draw(self) -> bool:
        return self._rng.random() < self.success_probability

    def _build(self, success: bool, context: Dict[str, Any]) -> SimulationResult:
        return SimulationResult(success=success, reference=fake_tx_hash() if success else None)

    async def run(self, **context: Any) -> SimulationResult:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        result = self._build(self._draw(), context)
        logger.info("%s simulated success=%s", self.name, result.success)
        return result


class KycVerificationSimulator(RandomOutcomeSimulator):
    # Stands in for a document/face-match provider; reference is the verification id.
    name = "kyc_verification"

    def _build(self, success: bool, context: Dict[str, Any]) -> SimulationResult:
        return SimulationResult(
            success=success,
            reference=f"kyc_{uuid.uuid4()}",
            details={
                "status": "verified" if success else "rejected",
                "confidence": round(self._rng.random() * 100, 2),
            },
        )


class PaymentSettlementSimulator(RandomOutcomeSimulator):
    """Delivery of purchased USDT to the buyer's wallet."""

    name = "payment_settlement"


class WalletTransferSimulator(RandomOutcomeSimulator):
    """Outbound USDT transfer to an external address."""

    name = "wallet_transfer"


@dataclass
class Simulators:
    kyc: Simulator
    payment: Simulator
    transfer: Simulator

    @classmethod
    def from_settings(cls, settings: Settings, rng: Optional[random.Random] = None) -> "Simulators":
        rng = rng or random.Random()
        return cls(
            kyc=KycVerificationSimulator(
                settings.kyc_delay_seconds, settings.kyc_success_probability, rng
            ),
            payment=PaymentSettlementSimulator(
                settings.payment_delay_seconds, settings.payment_success_probability, rng
            ),
            transfer=WalletTransferSimulator(
                settings.transfer_delay_seconds, settings.transfer_success_probability, rng
            ),
        )
