"""Domain constants and enumerations for validation.

Kept as plain sets/tuples; pydantic models narrow them with Literal types.
"""

from typing import Set, Tuple

KYC_STATUSES: Set[str] = {"pending", "verified", "rejected"}
KYC_DOCUMENTS: Tuple[str, ...] = ("aadhaar", "pan", "selfie")

TRANSACTION_TYPES: Set[str] = {"buy", "transfer"}
TRANSACTION_STATUSES: Set[str] = {"completed", "failed"}

ORDER_CURRENCIES: Set[str] = {"INR"}

# Base58 alphabet used by TRON (TRC20) addresses
TRC20_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
TRC20_PREFIX = "T"
TRC20_BODY_LENGTH = 33
