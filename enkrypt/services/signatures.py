"""Checkout callback signatures.

The gateway signs ``"<order_id>|<payment_id>"`` with HMAC-SHA256 keyed by the
merchant secret and sends the hex digest back with the callback.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

logger = logging.getLogger("enkrypt.signatures")


def sign_payment(order_id: str, payment_id: str, secret: str) -> str:
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode(), body.encode(), hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = sign_payment(order_id, payment_id, secret)
    valid = hmac.compare_digest(expected.encode(), signature.encode())
    if not valid:
        logger.warning("payment signature mismatch for order %s", order_id)
    return valid
