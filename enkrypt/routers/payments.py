from fastapi import APIRouter, Depends, HTTPException, Request

from enkrypt.core.config import Settings
from enkrypt.db.store import MemoryStore, OrderNotFound, UserNotFound
from enkrypt.models.payment import (
    CreateOrderIn,
    OrderEnvelope,
    OrderOut,
    PaymentVerifyEnvelope,
    PaymentVerifyIn,
    SettledTransactionOut,
)
from enkrypt.services.payments import (
    InvalidAmount,
    InvalidSignature,
    KycRequired,
    OrderInProgress,
    OrderOwnershipMismatch,
    create_order,
    settle_payment,
)
from enkrypt.services.simulators import Simulator

router = APIRouter(prefix="/api/payment", tags=["payments"])


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_settlement(request: Request) -> Simulator:
    return request.app.state.simulators.payment


@router.post("/create-order", response_model=OrderEnvelope, summary="Create a checkout order")
async def create_checkout_order(payload: CreateOrderIn, store: MemoryStore = Depends(get_store)):
    try:
        order = create_order(store, payload.uid, payload.amount, payload.currency)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail="User not found") from e
    except KycRequired as e:
        raise HTTPException(status_code=403, detail="KYC verification required") from e
    return OrderEnvelope(order=OrderOut.from_row(order))


@router.post(
    "/verify",
    response_model=PaymentVerifyEnvelope,
    summary="Verify a checkout callback and settle the purchase",
)
async def verify_payment(
    payload: PaymentVerifyIn,
    store: MemoryStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
    settlement: Simulator = Depends(get_settlement),
):
    try:
        tx, duplicate = await settle_payment(
            store, settlement, settings.razorpay_key_secret, payload
        )
    except InvalidSignature as e:
        raise HTTPException(status_code=400, detail="Invalid payment signature") from e
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail="Order not found") from e
    except OrderOwnershipMismatch as e:
        raise HTTPException(status_code=400, detail="Order does not belong to user") from e
    except OrderInProgress as e:
        raise HTTPException(status_code=409, detail="Payment is already being processed") from e
    except InvalidAmount as e:
        raise HTTPException(status_code=400, detail="Invalid USDT amount") from e
    return PaymentVerifyEnvelope(
        transaction=SettledTransactionOut(
            id=tx["id"],
            status=tx["status"],
            tx_hash=tx["tx_hash"],
            usdt_amount=tx["usdt_amount"],
        ),
        duplicate=duplicate,
    )
