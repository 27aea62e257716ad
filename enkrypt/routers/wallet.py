from fastapi import APIRouter, Depends, HTTPException, Request

from enkrypt.db.store import InsufficientBalance, MemoryStore, UserNotFound
from enkrypt.models.transaction import TransferEnvelope, TransferIn
from enkrypt.services.simulators import Simulator
from enkrypt.services.transfers import send_usdt

router = APIRouter(prefix="/api/wallet", tags=["wallet"])


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_transfer_simulator(request: Request) -> Simulator:
    return request.app.state.simulators.transfer


@router.post("/transfer", response_model=TransferEnvelope, summary="Send USDT to an external address")
async def transfer(
    payload: TransferIn,
    store: MemoryStore = Depends(get_store),
    simulator: Simulator = Depends(get_transfer_simulator),
):
    try:
        tx, balance = await send_usdt(
            store, simulator, payload.uid, payload.to_address, payload.amount
        )
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail="User not found") from e
    except InsufficientBalance as e:
        raise HTTPException(status_code=400, detail="Insufficient balance") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    succeeded = tx["status"] == "completed"
    return TransferEnvelope(
        success=succeeded,
        error=None if succeeded else "Transfer failed",
        tx_hash=tx["tx_hash"],
        new_balance=balance,
    )
