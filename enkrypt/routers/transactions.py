from fastapi import APIRouter, Depends, Request

from enkrypt.db.store import MemoryStore
from enkrypt.models.transaction import TransactionListEnvelope, TransactionOut

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


@router.get("/{uid}", response_model=TransactionListEnvelope, summary="Transaction history, newest first")
async def list_transactions(uid: str, store: MemoryStore = Depends(get_store)):
    # Unknown users simply have no history
    rows = store.list_transactions(uid)
    return TransactionListEnvelope(transactions=[TransactionOut.from_row(r) for r in rows])
