"""Buy flow: checkout order creation and callback settlement.

Orders are created locally in the gateway's shape (amount in paise, receipt
id). The callback is authenticated with the gateway signature, then the
settlement simulator decides whether the purchased USDT reaches the wallet.
An order settles at most once; repeated callbacks return the recorded
transaction.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Tuple

from enkrypt.db.store import MemoryStore, OrderNotFound
from enkrypt.models.payment import PaymentVerifyIn
from enkrypt.services.money import round2, round_asset, to_paise
from enkrypt.services.signatures import verify_payment_signature
from enkrypt.services.simulators import Simulator

logger = logging.getLogger("enkrypt.payments")


class PaymentError(Exception):
    pass


class KycRequired(PaymentError):
    pass


class InvalidSignature(PaymentError):
    pass


class OrderOwnershipMismatch(PaymentError):
    pass


class OrderInProgress(PaymentError):
    pass


class InvalidAmount(PaymentError):
    pass


def create_order(store: MemoryStore, uid: str, amount: float, currency: str = "INR") -> dict:
    user = store.require_user(uid)
    if user["kyc_status"] != "verified":
        raise KycRequired(uid)
    order = store.create_order(
        order_id=f"order_{secrets.token_hex(7)}",
        uid=uid,
        amount=to_paise(amount),
        currency=currency,
        receipt=f"receipt_{int(time.time() * 1000)}",
    )
    logger.info("order %s created for %s amount=%d %s", order["id"], uid, order["amount"], currency)
    return order


async def settle_payment(
    store: MemoryStore, settlement: Simulator, secret: str, payload: PaymentVerifyIn
) -> Tuple[dict, bool]:
    """Verify and settle one callback; returns (transaction, duplicate)."""
    if not verify_payment_signature(
        payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature, secret
    ):
        raise InvalidSignature(payload.razorpay_order_id)

    order = store.get_order(payload.razorpay_order_id)
    if order is None:
        raise OrderNotFound(payload.razorpay_order_id)
    if order["uid"] != payload.uid:
        raise OrderOwnershipMismatch(payload.razorpay_order_id)

    usdt_amount = round_asset(payload.usdt_amount)
    if usdt_amount <= 0:
        raise InvalidAmount(payload.usdt_amount)

    order, claimed = store.claim_order(order["id"])
    if not claimed:
        if order["status"] == "paid" and order["transaction_id"]:
            logger.info("order %s already settled, replaying transaction", order["id"])
            return store.get_transaction(order["transaction_id"]), True
        raise OrderInProgress(order["id"])

    try:
        result = await settlement.run(uid=payload.uid, amount=usdt_amount)
        tx = store.record_buy(
            order["id"],
            credit_balance=result.success,
            uid=payload.uid,
            usdt_amount=usdt_amount,
            status="completed" if result.success else "failed",
            inr_amount=round2(payload.inr_amount),
            rate=payload.rate,
            tx_hash=result.reference,
            razorpay_payment_id=payload.razorpay_payment_id,
        )
    except Exception:
        store.release_order(order["id"])
        raise
    logger.info("order %s settled status=%s usdt=%s", order["id"], tx["status"], usdt_amount)
    return tx, False
