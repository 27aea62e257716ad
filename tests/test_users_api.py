from enkrypt.services.wallets import generate_trc20_address, looks_like_trc20


def test_register_returns_profile(register):
    user = register()
    assert user["uid"] == "user-1"
    assert user["displayName"] == "User One"
    assert user["balance"] == 0
    assert user["kycStatus"] == "pending"
    assert looks_like_trc20(user["walletAddress"])


def test_register_twice_keeps_original_profile(client, register):
    first = register()
    second = register(email="changed@example.com")
    assert second["walletAddress"] == first["walletAddress"]
    assert second["email"] == "user1@example.com"


def test_register_missing_fields(client):
    resp = client.post("/api/user/register", json={"uid": "x"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request"


def test_get_user(client, register):
    register()
    resp = client.get("/api/user/user-1")
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "user1@example.com"


def test_get_unknown_user(client):
    resp = client.get("/api/user/missing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "User not found"}


def test_unknown_route_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "No route for GET /api/nope"


def test_generated_addresses_differ():
    addresses = {generate_trc20_address() for _ in range(20)}
    assert len(addresses) == 20
    assert all(a.startswith("T") and len(a) == 34 for a in addresses)
    assert not looks_like_trc20("T0OIl" + "1" * 29)


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["rateProvider"] == "static"
