"""KYC submission flow: persist uploaded documents, run the verifier, record the verdict.

Each upload creates a fresh KycRequest; older requests are kept but the
latest one (by submission time) is what status lookups report.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict

from fastapi import UploadFile

from enkrypt.db.store import MemoryStore
from enkrypt.services.simulators import Simulator

logger = logging.getLogger("enkrypt.kyc")

_CHUNK = 64 * 1024


class DocumentRejected(ValueError):
    pass


async def read_document(field: str, upload: UploadFile, max_bytes: int) -> bytes:
    """Read one uploaded image into memory, enforcing type and size limits."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise DocumentRejected(f"Only image files are allowed ({field})")
    data = bytearray()
    while True:
        chunk = await upload.read(_CHUNK)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > max_bytes:
            raise DocumentRejected(f"File too large ({field})")
    return bytes(data)


async def store_documents(uploads: Dict[str, UploadFile], upload_dir: Path, max_bytes: int) -> Dict[str, str]:
    """Validate every upload, then write them all; returns field -> stored file name.

    Nothing is written unless all documents pass validation.
    """
    contents = {field: await read_document(field, upload, max_bytes) for field, upload in uploads.items()}
    stamp = int(time.time() * 1000)
    stored: Dict[str, str] = {}
    for field, data in contents.items():
        original = Path(uploads[field].filename or "document").name
        stored[field] = f"{stamp}-{field}-{original}"
        (upload_dir / stored[field]).write_bytes(data)
    return stored


async def submit_kyc(store: MemoryStore, verifier: Simulator, uid: str, documents: Dict[str, str]) -> dict:
    result = await verifier.run(uid=uid, documents=documents)
    status = result.details.get("status") or ("verified" if result.success else "rejected")
    request = store.insert_kyc_request(
        uid=uid,
        documents=documents,
        status=status,
        verification_id=result.reference or "",
    )
    if store.set_kyc_status(uid, status) is None:
        logger.warning("kyc request %s filed for unknown user %s", request["id"], uid)
    logger.info("kyc request %s for %s -> %s", request["id"], uid, status)
    return request
