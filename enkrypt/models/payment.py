from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, Envelope
from .constants import ORDER_CURRENCIES


class CreateOrderIn(CamelModel):
    amount: float = Field(..., gt=0, description="INR amount (rupees)")
    currency: str = "INR"
    uid: str = Field(..., min_length=1)

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        v = v.upper()
        if v not in ORDER_CURRENCIES:
            raise ValueError("unsupported currency")
        return v


class OrderOut(CamelModel):
    id: str
    amount: int = Field(..., description="Amount in paise")
    currency: str
    receipt: str

    @classmethod
    def from_row(cls, row: dict) -> "OrderOut":
        return cls(
            id=row["id"],
            amount=row["amount"],
            currency=row["currency"],
            receipt=row["receipt"],
        )


class OrderEnvelope(Envelope):
    order: OrderOut


class PaymentVerifyIn(CamelModel):
    """Checkout callback payload; gateway ids keep the gateway's snake_case keys."""

    razorpay_order_id: str = Field(..., alias="razorpay_order_id", min_length=1)
    razorpay_payment_id: str = Field(..., alias="razorpay_payment_id", min_length=1)
    razorpay_signature: str = Field(..., alias="razorpay_signature", min_length=1)
    uid: str = Field(..., min_length=1)
    usdt_amount: float = Field(..., gt=0)
    inr_amount: float = Field(0, ge=0)
    rate: float = Field(0, ge=0)


class SettledTransactionOut(CamelModel):
    id: str
    status: str
    tx_hash: Optional[str] = None
    usdt_amount: float


class PaymentVerifyEnvelope(Envelope):
    transaction: SettledTransactionOut
    duplicate: bool = False
