from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from .base import CamelModel, Envelope


class UserRegisterIn(CamelModel):
    uid: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    display_name: str = ""

    @field_validator("email")
    @classmethod
    def looks_like_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class UserOut(CamelModel):
    uid: str
    email: str
    display_name: str
    wallet_address: str
    balance: float
    kyc_status: Literal["pending", "verified", "rejected"]

    @classmethod
    def from_row(cls, row: dict) -> "UserOut":
        return cls(
            uid=row["uid"],
            email=row["email"],
            display_name=row["display_name"],
            wallet_address=row["wallet_address"],
            balance=row["balance"],
            kyc_status=row["kyc_status"],
        )


class UserEnvelope(Envelope):
    user: UserOut
