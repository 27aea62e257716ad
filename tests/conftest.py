"""Shared fixtures: an isolated app per test with instant, always-successful simulators."""

import pytest
from fastapi.testclient import TestClient

from enkrypt.core.config import Settings
from enkrypt.main import create_app

SECRET = "test_secret_key"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def settings(tmp_path):
    return Settings(
        debug=False,
        exchange_rate_provider="static",
        fallback_rate=0.012,
        razorpay_key_secret=SECRET,
        upload_dir=tmp_path / "uploads",
        kyc_delay_seconds=0,
        kyc_success_probability=1.0,
        payment_delay_seconds=0,
        payment_success_probability=1.0,
        transfer_delay_seconds=0,
        transfer_success_probability=1.0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings_override=settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def store(app):
    return app.state.store


@pytest.fixture
def register(client):
    def _register(uid="user-1", email="user1@example.com", display_name="User One"):
        resp = client.post(
            "/api/user/register",
            json={"uid": uid, "email": email, "displayName": display_name},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["user"]

    return _register


@pytest.fixture
def kyc_files():
    def _files(*names):
        names = names or ("aadhaar", "pan", "selfie")
        return {n: (f"{n}.png", PNG_BYTES, "image/png") for n in names}

    return _files
