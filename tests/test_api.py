from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from rewardjar.crud import record as record_crud
from rewardjar.services import token_service

STARS = {"name": "Stars", "color": "#3B82F6", "icon": "⭐"}


def _create_token(client, body=STARS):
    resp = client.post("/api/tokens", json=body)
    assert resp.status_code == 201
    return resp.json()["data"]


def test_health(client):
    for path in ("/health", "/api/health"):
        body = client.get(path).json()
        assert body["success"] is True
        assert "timestamp" in body


def test_jar_and_reward_round_trip(client):
    created = client.post("/api/tokens", json=STARS)
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    assert body["message"] == "Token created successfully"
    token = body["data"]
    assert token["count"] == 0
    assert token["kind"] == "token"
    assert {"createdAt", "updatedAt"} <= set(token)

    earned = client.post(f"/api/tokens/{token['id']}/earn", json={"amount": 5, "description": "Good day"})
    assert earned.status_code == 200
    assert earned.json()["data"]["count"] == 5
    assert earned.json()["message"] == "Earned 5 tokens"

    reward = client.post(
        "/api/rewards",
        json={"name": "Movie Night", "tokenCost": 5, "tokenType": token["id"]},
    )
    assert reward.status_code == 201
    assert reward.json()["data"]["isActive"] is True

    spent = client.post(
        f"/api/tokens/{token['id']}/spend",
        json={"amount": 5, "description": "Redeemed: Movie Night"},
    )
    assert spent.status_code == 200
    assert spent.json()["data"]["count"] == 0

    refused = client.post(f"/api/tokens/{token['id']}/spend", json={"amount": 1})
    assert refused.status_code == 400
    assert refused.json() == {"success": False, "error": "Insufficient tokens"}

    tokens = client.get("/api/tokens").json()["data"]
    assert tokens[0]["count"] == 0

    log = client.get(f"/api/transactions/token/{token['id']}").json()["data"]
    assert [(t["transactionKind"], t["amount"]) for t in log] == [("spend", 5), ("earn", 5)]
    assert log[1]["description"] == "Good day"
    assert log[0]["tokenName"] == "Stars"


def test_add_alias_earns(client):
    token = _create_token(client)
    resp = client.post(f"/api/tokens/{token['id']}/add", json={"amount": 2})
    assert resp.json()["data"]["count"] == 2
    assert client.get("/api/transactions").json()["data"][0]["description"] == "Tokens added"


def test_timestamps_match_between_write_and_read(client):
    created = _create_token(client)
    listed = client.get("/api/tokens").json()["data"][0]
    assert listed["createdAt"] == created["createdAt"]
    assert listed["updatedAt"] == created["updatedAt"]

    earned = client.post(f"/api/tokens/{created['id']}/earn", json={"amount": 1}).json()["data"]
    listed = client.get("/api/tokens").json()["data"][0]
    assert listed["updatedAt"] == earned["updatedAt"]
    assert listed["createdAt"] == created["createdAt"]


def test_amount_must_be_positive(client):
    token = _create_token(client)
    for bad in ({"amount": 0}, {"amount": -3}, {}, {"amount": 2, "description": "x" * 501}):
        resp = client.post(f"/api/tokens/{token['id']}/earn", json=bad)
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert "data" not in body
    assert client.get("/api/transactions").json()["data"] == []


def test_create_token_validation(client):
    resp = client.post("/api/tokens", json={"name": "", "color": "#3B82F6", "icon": "⭐"})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("name:")

    resp = client.post("/api/tokens", json={"name": "Stars", "color": "#3B82F6AA", "icon": "⭐"})
    assert resp.status_code == 400


def test_update_token_rejects_count(client):
    token = _create_token(client)
    client.post(f"/api/tokens/{token['id']}/earn", json={"amount": 3})

    resp = client.put(f"/api/tokens/{token['id']}", json={"count": 99})
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = client.put(f"/api/tokens/{token['id']}", json={"name": "Moons", "icon": "🌙"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert (data["name"], data["icon"], data["count"]) == ("Moons", "🌙", 3)


def test_unknown_token_is_404(client):
    for method, path, body in (
        ("put", "/api/tokens/token_missing", {"name": "x"}),
        ("delete", "/api/tokens/token_missing", None),
        ("post", "/api/tokens/token_missing/earn", {"amount": 1}),
        ("post", "/api/tokens/token_missing/spend", {"amount": 1}),
        ("get", "/api/transactions/token/token_missing", None),
    ):
        kwargs = {"json": body} if body is not None else {}
        resp = getattr(client, method)(path, **kwargs)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Token not found"}


def test_reward_with_unknown_token_is_rejected(client):
    resp = client.post(
        "/api/rewards",
        json={"name": "Movie Night", "tokenCost": 5, "tokenType": "token_missing"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid token type"}
    assert client.get("/api/rewards").json()["data"] == []


def test_reward_cost_must_be_at_least_one(client):
    token = _create_token(client)
    resp = client.post("/api/rewards", json={"name": "Free", "tokenCost": 0, "tokenType": token["id"]})
    assert resp.status_code == 400


def test_reward_update_toggle_delete(client):
    token = _create_token(client)
    reward = client.post(
        "/api/rewards",
        json={"name": "Movie Night", "description": "Pick any film", "tokenCost": 5, "tokenType": token["id"]},
    ).json()["data"]

    updated = client.put(f"/api/rewards/{reward['id']}", json={"tokenCost": 7})
    assert updated.status_code == 200
    assert updated.json()["data"]["tokenCost"] == 7
    assert updated.json()["data"]["description"] == "Pick any film"

    bad = client.put(f"/api/rewards/{reward['id']}", json={"tokenType": "token_missing"})
    assert bad.status_code == 400

    off = client.patch(f"/api/rewards/{reward['id']}/toggle")
    assert off.json()["data"]["isActive"] is False
    assert off.json()["message"] == "Reward deactivated successfully"
    on = client.patch(f"/api/rewards/{reward['id']}/toggle")
    assert on.json()["message"] == "Reward activated successfully"

    deleted = client.delete(f"/api/rewards/{reward['id']}")
    assert deleted.json() == {"success": True, "message": "Reward deleted successfully"}
    assert client.patch(f"/api/rewards/{reward['id']}/toggle").status_code == 404


def test_deleted_token_leaves_reward_dangling(client):
    token = _create_token(client)
    reward = client.post(
        "/api/rewards",
        json={"name": "Movie Night", "tokenCost": 5, "tokenType": token["id"]},
    ).json()["data"]

    resp = client.delete(f"/api/tokens/{token['id']}")
    assert resp.json() == {"success": True, "message": "Token deleted successfully"}

    rewards = client.get("/api/rewards").json()["data"]
    assert [(r["id"], r["tokenType"]) for r in rewards] == [(reward["id"], token["id"])]
    assert client.get("/api/tokens").json()["data"] == []


def test_transaction_paging(client):
    token = _create_token(client)
    for amount in (1, 2, 3):
        client.post(f"/api/tokens/{token['id']}/earn", json={"amount": amount})

    page = client.get("/api/transactions", params={"limit": 2}).json()["data"]
    assert [t["amount"] for t in page] == [3, 2]
    rest = client.get("/api/transactions", params={"limit": 2, "offset": 2}).json()["data"]
    assert [t["amount"] for t in rest] == [1]

    assert client.get("/api/transactions", params={"limit": 0}).status_code == 400


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Endpoint not found"}


def test_store_failure_is_500_with_generic_message(client, monkeypatch):
    def broken_query(db, kind):
        raise SQLAlchemyError("connection refused to db-host:5432")

    monkeypatch.setattr(record_crud, "query_by_kind", broken_query)

    resp = client.get("/api/tokens")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to get tokens"}


def test_unhandled_error_is_500(app, monkeypatch):
    def explode(db):
        raise RuntimeError("boom")

    monkeypatch.setattr(token_service, "list_tokens", explode)

    resp = TestClient(app, raise_server_exceptions=False).get("/api/tokens")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}
