import json
import os
import sys
import tempfile

from fastapi.testclient import TestClient

"""Smoke test for the full buy -> send flow against an in-process app.

Scenario:
1. Register a user and pass KYC (verifier forced to succeed)
2. Convert 1000 INR at the current rate and buy that much USDT
3. Replay the payment callback (must not double-credit)
4. Send part of the balance to an external address
5. Print the resulting profile and history
"""


def run():
    from enkrypt.core.config import Settings
    from enkrypt.main import create_app
    from enkrypt.services.signatures import sign_payment

    with tempfile.TemporaryDirectory() as d:
        settings = Settings(
            upload_dir=os.path.join(d, "uploads"),
            exchange_rate_provider=os.environ.get("EXCHANGE_RATE_PROVIDER", "static"),
            kyc_delay_seconds=0,
            kyc_success_probability=1.0,
            payment_delay_seconds=0,
            transfer_delay_seconds=0,
        )
        client = TestClient(create_app(settings_override=settings))

        uid = "smoke-user"
        client.post("/api/user/register", json={"uid": uid, "email": "smoke@example.com"})
        png = ("doc.png", b"\x89PNG\r\n\x1a\n", "image/png")
        kyc = client.post(
            "/api/kyc/upload",
            data={"uid": uid},
            files={"aadhaar": png, "pan": png, "selfie": png},
        ).json()

        conversion = client.get("/api/convert", params={"amount": 1000}).json()
        order = client.post(
            "/api/payment/create-order", json={"amount": 1000, "uid": uid}
        ).json()["order"]
        callback = {
            "razorpay_order_id": order["id"],
            "razorpay_payment_id": "pay_smoke",
            "razorpay_signature": sign_payment(
                order["id"], "pay_smoke", settings.razorpay_key_secret
            ),
            "uid": uid,
            "usdtAmount": conversion["usdtAmount"],
            "inrAmount": 1000,
            "rate": conversion["rate"],
        }
        first = client.post("/api/payment/verify", json=callback).json()
        replay = client.post("/api/payment/verify", json=callback).json()

        profile = client.get(f"/api/user/{uid}").json()["user"]
        send = None
        if profile["balance"] > 0:
            send = client.post(
                "/api/wallet/transfer",
                json={
                    "uid": uid,
                    "toAddress": "T" + "9" * 33,
                    "amount": round(profile["balance"] / 2, 6),
                },
            ).json()

        print(
            json.dumps(
                {
                    "kyc": kyc,
                    "conversion": conversion,
                    "payment": first,
                    "replay_duplicate": replay.get("duplicate"),
                    "transfer": send,
                    "profile": client.get(f"/api/user/{uid}").json()["user"],
                    "history": client.get(f"/api/transactions/{uid}").json()["transactions"],
                },
                indent=2,
            )
        )
        assert replay.get("duplicate") is True, "payment replay must not settle twice"


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
