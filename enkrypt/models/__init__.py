"""Pydantic wire models for the Enkrypt exchange API."""

from .constants import (
    KYC_STATUSES,
    KYC_DOCUMENTS,
    TRANSACTION_TYPES,
    TRANSACTION_STATUSES,
)  # re-export
from .user import UserRegisterIn, UserOut
from .transaction import TransactionOut, TransferIn
from .kyc import KycSubmissionOut, KycRequestSummary
from .payment import CreateOrderIn, OrderOut, PaymentVerifyIn

__all__ = [
    "KYC_STATUSES",
    "KYC_DOCUMENTS",
    "TRANSACTION_TYPES",
    "TRANSACTION_STATUSES",
    "UserRegisterIn",
    "UserOut",
    "TransactionOut",
    "TransferIn",
    "KycSubmissionOut",
    "KycRequestSummary",
    "CreateOrderIn",
    "OrderOut",
    "PaymentVerifyIn",
]
