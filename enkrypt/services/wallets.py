"""Simulated TRC20 wallet addresses.

Addresses look like TRON base58 addresses ('T' + 33 base58 chars) but carry
no checksum and map to no key pair.
"""

from __future__ import annotations

import re
import secrets

from enkrypt.models.constants import TRC20_ALPHABET, TRC20_BODY_LENGTH, TRC20_PREFIX

TRC20_PATTERN = re.compile(
    rf"^{TRC20_PREFIX}[{re.escape(TRC20_ALPHABET)}]{{{TRC20_BODY_LENGTH}}}$"
)


def generate_trc20_address() -> str:
    body = "".join(secrets.choice(TRC20_ALPHABET) for _ in range(TRC20_BODY_LENGTH))
    return TRC20_PREFIX + body


def looks_like_trc20(address: str) -> bool:
    return bool(TRC20_PATTERN.match(address))
