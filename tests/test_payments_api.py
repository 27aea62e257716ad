import pytest

from enkrypt.services.signatures import sign_payment, verify_payment_signature
from enkrypt.services.simulators import PaymentSettlementSimulator

SECRET = "test_secret_key"


@pytest.fixture
def verified_user(register, store):
    user = register()
    store.set_kyc_status(user["uid"], "verified")
    return user


def _create_order(client, amount=1000, uid="user-1"):
    resp = client.post("/api/payment/create-order", json={"amount": amount, "uid": uid})
    assert resp.status_code == 200, resp.text
    return resp.json()["order"]


def _verify(client, order_id, payment_id="pay_001", usdt=12.0, signature=None, uid="user-1"):
    return client.post(
        "/api/payment/verify",
        json={
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature or sign_payment(order_id, payment_id, SECRET),
            "uid": uid,
            "usdtAmount": usdt,
            "inrAmount": 1000,
            "rate": 0.012,
        },
    )


def test_signature_roundtrip_and_tamper():
    sig = sign_payment("order_1", "pay_1", "k")
    assert verify_payment_signature("order_1", "pay_1", sig, "k")
    assert not verify_payment_signature("order_1", "pay_2", sig, "k")
    assert not verify_payment_signature("order_1", "pay_1", sig, "other")


def test_create_order_in_paise(client, verified_user):
    order = _create_order(client, amount=499.99)
    assert order["id"].startswith("order_")
    assert order["amount"] == 49999
    assert order["currency"] == "INR"
    assert order["receipt"].startswith("receipt_")


def test_create_order_requires_kyc(client, register):
    register()
    resp = client.post("/api/payment/create-order", json={"amount": 100, "uid": "user-1"})
    assert resp.status_code == 403
    assert resp.json()["error"] == "KYC verification required"


def test_create_order_unknown_user(client):
    resp = client.post("/api/payment/create-order", json={"amount": 100, "uid": "ghost"})
    assert resp.status_code == 404


def test_create_order_rejects_bad_amount(client, verified_user):
    resp = client.post("/api/payment/create-order", json={"amount": 0, "uid": "user-1"})
    assert resp.status_code == 422


def test_verify_credits_balance_and_records_buy(client, verified_user):
    order = _create_order(client)
    resp = _verify(client, order["id"])
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["duplicate"] is False
    tx = body["transaction"]
    assert tx["status"] == "completed"
    assert tx["txHash"].startswith("0x") and len(tx["txHash"]) == 66
    assert client.get("/api/user/user-1").json()["user"]["balance"] == 12.0

    history = client.get("/api/transactions/user-1").json()["transactions"]
    assert len(history) == 1
    assert history[0]["type"] == "buy"
    assert history[0]["inrAmount"] == 1000
    assert history[0]["rate"] == 0.012


def test_repeated_verify_does_not_double_credit(client, verified_user, store):
    order = _create_order(client)
    first = _verify(client, order["id"]).json()
    second = _verify(client, order["id"]).json()
    assert second["duplicate"] is True
    assert second["transaction"]["id"] == first["transaction"]["id"]
    assert store.get_user("user-1")["balance"] == 12.0
    assert len(store.list_transactions("user-1")) == 1


def test_invalid_signature_rejected(client, verified_user, store):
    order = _create_order(client)
    resp = _verify(client, order["id"], signature="deadbeef")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid payment signature"}
    assert store.get_user("user-1")["balance"] == 0
    assert store.get_order(order["id"])["status"] == "created"


def test_verify_unknown_order(client, verified_user):
    resp = _verify(client, "order_unknown")
    assert resp.status_code == 404


def test_verify_other_users_order(client, verified_user, register):
    register(uid="user-2", email="two@example.com")
    order = _create_order(client)
    resp = _verify(client, order["id"], uid="user-2")
    assert resp.status_code == 400


def test_failed_settlement_records_failed_buy(app, client, verified_user, store):
    app.state.simulators.payment = PaymentSettlementSimulator(0, 0.0)
    order = _create_order(client)
    body = _verify(client, order["id"]).json()
    assert body["transaction"]["status"] == "failed"
    assert body["transaction"]["txHash"] is None
    assert store.get_user("user-1")["balance"] == 0
    assert store.get_order(order["id"])["status"] == "paid"


def test_amount_rounding_to_zero_rejected_before_claim(client, verified_user, store):
    order = _create_order(client)
    for _ in range(2):
        resp = _verify(client, order["id"], usdt=0.0000001)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid USDT amount"}
    assert store.get_order(order["id"])["status"] == "created"
    assert store.list_transactions("user-1") == []

    resp = _verify(client, order["id"])
    assert resp.status_code == 200, resp.text
    assert store.get_user("user-1")["balance"] == 12.0


class _ExplodingSettlement:
    async def run(self, **context):
        raise RuntimeError("gateway timeout")


def test_crashing_settlement_releases_order(app, verified_user, store):
    from fastapi.testclient import TestClient

    client = TestClient(app, raise_server_exceptions=False)
    order = _create_order(client)
    app.state.simulators.payment = _ExplodingSettlement()
    resp = _verify(client, order["id"])
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "An unexpected error occurred."}
    assert store.get_order(order["id"])["status"] == "created"
    assert store.list_transactions("user-1") == []

    app.state.simulators.payment = PaymentSettlementSimulator(0, 1.0)
    resp = _verify(client, order["id"])
    assert resp.status_code == 200, resp.text
    assert resp.json()["duplicate"] is False
    assert store.get_order(order["id"])["status"] == "paid"
    assert store.get_user("user-1")["balance"] == 12.0
