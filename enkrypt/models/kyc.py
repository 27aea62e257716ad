from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from .base import CamelModel, Envelope


class KycSubmissionOut(CamelModel):
    id: str
    status: Literal["verified", "rejected"]
    verification_id: str


class KycUploadEnvelope(Envelope):
    kyc_request: KycSubmissionOut


class KycRequestSummary(CamelModel):
    id: str
    status: Literal["verified", "rejected"]
    submitted_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> "KycRequestSummary":
        return cls(
            id=row["id"],
            status=row["status"],
            submitted_at=row["submitted_at"],
            updated_at=row["updated_at"],
        )


class KycStatusEnvelope(Envelope):
    kyc_status: Literal["pending", "verified", "rejected"]
    kyc_request: Optional[KycRequestSummary] = None
