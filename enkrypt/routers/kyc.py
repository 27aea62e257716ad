from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from enkrypt.core.config import Settings
from enkrypt.db.store import MemoryStore
from enkrypt.models.constants import KYC_DOCUMENTS
from enkrypt.models.kyc import (
    KycRequestSummary,
    KycStatusEnvelope,
    KycSubmissionOut,
    KycUploadEnvelope,
)
from enkrypt.services.kyc import DocumentRejected, store_documents, submit_kyc
from enkrypt.services.simulators import Simulator

router = APIRouter(prefix="/api/kyc", tags=["kyc"])


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_verifier(request: Request) -> Simulator:
    return request.app.state.simulators.kyc


@router.post("/upload", response_model=KycUploadEnvelope, summary="Submit KYC documents")
async def upload_documents(
    uid: Optional[str] = Form(None),
    aadhaar: Optional[UploadFile] = File(None),
    pan: Optional[UploadFile] = File(None),
    selfie: Optional[UploadFile] = File(None),
    store: MemoryStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
    verifier: Simulator = Depends(get_verifier),
):
    if not uid:
        raise HTTPException(status_code=400, detail="User ID required")
    uploads = {"aadhaar": aadhaar, "pan": pan, "selfie": selfie}
    if any(uploads[name] is None for name in KYC_DOCUMENTS):
        raise HTTPException(status_code=400, detail="All documents required")

    try:
        documents = await store_documents(
            {name: uploads[name] for name in KYC_DOCUMENTS},
            settings.upload_dir,
            settings.max_upload_bytes,
        )
    except DocumentRejected as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    request_row = await submit_kyc(store, verifier, uid, documents)
    return KycUploadEnvelope(
        kyc_request=KycSubmissionOut(
            id=request_row["id"],
            status=request_row["status"],
            verification_id=request_row["verification_id"],
        )
    )


@router.get("/status/{uid}", response_model=KycStatusEnvelope, summary="KYC status of a user")
async def kyc_status(uid: str, store: MemoryStore = Depends(get_store)):
    user = store.get_user(uid)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    latest = store.latest_kyc_request(uid)
    return KycStatusEnvelope(
        kyc_status=user["kyc_status"],
        kyc_request=KycRequestSummary.from_row(latest) if latest else None,
    )
