import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from enkrypt.db.store import MemoryStore
from enkrypt.models.user import UserEnvelope, UserOut, UserRegisterIn
from enkrypt.services.wallets import generate_trc20_address

router = APIRouter(prefix="/api/user", tags=["users"])
logger = logging.getLogger("enkrypt.users")


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


@router.post("/register", response_model=UserEnvelope, summary="Register a profile")
async def register(payload: UserRegisterIn, store: MemoryStore = Depends(get_store)):
    row, created = store.create_user(
        uid=payload.uid,
        email=payload.email,
        display_name=payload.display_name,
        wallet_address=generate_trc20_address(),
    )
    if created:
        logger.info("registered %s wallet=%s", row["uid"], row["wallet_address"])
    return UserEnvelope(user=UserOut.from_row(row))


@router.get("/{uid}", response_model=UserEnvelope, summary="Get a profile")
async def get_user(uid: str, store: MemoryStore = Depends(get_store)):
    row = store.get_user(uid)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return UserEnvelope(user=UserOut.from_row(row))
