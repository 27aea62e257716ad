from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .base import CamelModel, Envelope


class TransactionOut(CamelModel):
    id: str
    type: Literal["buy", "transfer"]
    inr_amount: Optional[float] = None
    usdt_amount: float
    rate: Optional[float] = None
    status: Literal["completed", "failed"]
    tx_hash: Optional[str] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> "TransactionOut":
        return cls(
            id=row["id"],
            type=row["type"],
            inr_amount=row.get("inr_amount"),
            usdt_amount=row["usdt_amount"],
            rate=row.get("rate"),
            status=row["status"],
            tx_hash=row.get("tx_hash"),
            from_address=row.get("from_address"),
            to_address=row.get("to_address"),
            created_at=row["created_at"],
        )


class TransactionListEnvelope(Envelope):
    transactions: List[TransactionOut]


class TransferIn(CamelModel):
    uid: str = Field(..., min_length=1)
    to_address: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, description="USDT amount to send")


class TransferEnvelope(Envelope):
    error: Optional[str] = None
    tx_hash: Optional[str] = None
    new_balance: float
