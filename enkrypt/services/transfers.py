"""Outbound USDT transfer from a user's simulated wallet.

The amount is debited atomically before the simulated chain transfer and
credited back if the transfer fails, so a failed send never loses funds.
"""

from __future__ import annotations

import logging
from typing import Tuple

from enkrypt.db.store import MemoryStore
from enkrypt.services.money import round_asset
from enkrypt.services.simulators import Simulator
from enkrypt.services.wallets import looks_like_trc20

logger = logging.getLogger("enkrypt.transfers")


async def send_usdt(
    store: MemoryStore, transfer: Simulator, uid: str, to_address: str, amount: float
) -> Tuple[dict, float]:
    """Returns (transaction, balance after the transfer)."""
    user = store.require_user(uid)
    amount = round_asset(amount)
    if not looks_like_trc20(to_address):
        logger.warning("transfer from %s to non-TRC20 address %r", uid, to_address)

    balance = store.debit(uid, amount)
    try:
        result = await transfer.run(
            from_address=user["wallet_address"], to_address=to_address, amount=amount
        )
    except Exception:
        store.credit(uid, amount)
        raise
    if not result.success:
        balance = store.credit(uid, amount)
        logger.info("transfer from %s failed, %s USDT returned", uid, amount)

    tx = store.insert_transaction(
        uid=uid,
        type="transfer",
        usdt_amount=amount,
        status="completed" if result.success else "failed",
        tx_hash=result.reference,
        from_address=user["wallet_address"],
        to_address=to_address,
    )
    return tx, balance
