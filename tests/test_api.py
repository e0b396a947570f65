"""Test the HTTP API end to end with TestClient and in-memory SQLite."""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeMarketData, FakePaymentGateway, webhook_payload
from goldsignal.application.use_cases.subscription_usecase import PAYMENT_PAID
from goldsignal.main import create_app

ADMIN = {"X-User-Id": "admin"}
TRADER = {"X-User-Id": "trader"}

BUY_SIGNAL = {
    "type": "buy",
    "entry_price": 2650.0,
    "stop_loss": 2640.0,
    "take_profit": 2670.0,
    "confidence": 80,
}


@pytest.fixture
def client(settings):
    app = create_app(settings)
    app.state.container.override("market_data", FakeMarketData())
    app.state.container.override("payment_gateway", FakePaymentGateway())
    with TestClient(app) as test_client:
        test_client.post("/api/users/profile", headers=ADMIN, json={"email": "admin@goldsignal.test"})
        test_client.post("/api/users/profile", headers=TRADER, json={"email": "trader@example.com"})
        yield test_client


def _make_vip(client, user_id="trader"):
    response = client.post(
        "/api/subscriptions", headers=ADMIN, json={"user_id": user_id, "plan_id": "vip"},
    )
    assert response.status_code == 201


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["service"] == "GoldSignal"
    assert body["database"] is True
    assert body["signal_monitor"] is False
    assert body["ws_clients"] == 0


def test_profiles(client):
    me = client.get("/api/users/me", headers=ADMIN).json()
    assert me["role"] == "admin"

    me = client.get("/api/users/me", headers=TRADER).json()
    assert me["effective_tier"] == "free"
    assert me["signal_quota"] == 5

    assert client.get("/api/users/me", headers={"X-User-Id": "nobody"}).status_code == 401
    duplicate = client.post("/api/users/profile", headers=TRADER, json={"email": "x@example.com"})
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "VALIDATION_ERROR"
    assert client.get("/api/users", headers=TRADER).status_code == 403


def test_signal_lifecycle_and_gating(client):
    created = client.post("/api/signals", headers=ADMIN, json=BUY_SIGNAL)
    assert created.status_code == 201
    signal_id = created.json()["id"]

    assert client.post("/api/signals", headers=TRADER, json=BUY_SIGNAL).status_code == 403

    locked = client.get("/api/signals", headers=TRADER)
    assert locked.status_code == 403
    assert locked.json()["error"] == "UPGRADE_REQUIRED"

    feed = client.get("/api/signals/feed", headers=TRADER).json()
    assert feed["quota"] == 5 and feed["used"] == 1

    _make_vip(client)
    listed = client.get("/api/signals", headers=TRADER).json()
    assert listed["total"] == 1
    assert client.get("/api/notifications/unread-count", headers=TRADER).json() == {"unread": 0}

    closed = client.post(
        f"/api/signals/{signal_id}/close", headers=ADMIN, json={"result": "win", "pips_result": 200},
    )
    assert closed.status_code == 200
    assert closed.json()["notified"] == 1
    inbox = client.get("/api/notifications", headers=TRADER).json()
    assert inbox["items"][0]["title"] == "Signal Closed - XAUUSD ✅"

    assert client.delete(f"/api/signals/{signal_id}", headers=ADMIN).status_code == 204
    missing = client.get(f"/api/signals/{signal_id}", headers=ADMIN)
    assert missing.status_code == 404
    assert missing.json()["error"] == "NOT_FOUND"


def test_invalid_signal_rejected(client):
    bad = dict(BUY_SIGNAL, stop_loss=2660.0)
    response = client.post("/api/signals", headers=ADMIN, json=bad)
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_SIGNAL"
    assert client.post("/api/signals", headers=ADMIN, json=dict(BUY_SIGNAL, type="hold")).status_code == 422


def test_paymongo_webhook(client):
    payload = json.dumps(webhook_payload(PAYMENT_PAID, "cs_api", "trader", "premium"))

    rejected = client.post(
        "/api/webhooks/paymongo", content=payload, headers={"paymongo-signature": "bad"},
    )
    assert rejected.status_code == 401
    assert rejected.json()["error"] == "INVALID_SIGNATURE"

    garbage = client.post(
        "/api/webhooks/paymongo", content=b"not json", headers={"paymongo-signature": "valid"},
    )
    assert garbage.status_code == 400

    accepted = client.post(
        "/api/webhooks/paymongo", content=payload, headers={"paymongo-signature": "valid"},
    )
    assert accepted.status_code == 200
    assert accepted.json()["processed"] is True

    me = client.get("/api/users/me", headers=TRADER).json()
    assert me["effective_tier"] == "premium"
    mine = client.get("/api/subscriptions/me", headers=TRADER).json()
    assert mine["subscription"]["plan_id"] == "premium"


def test_checkout_and_plans(client):
    plans = client.get("/api/plans").json()["plans"]
    assert [p["id"] for p in plans] == ["premium", "vip"]
    assert client.get("/api/plans/gold").status_code == 400

    checkout = client.post("/api/subscriptions/checkout", headers=TRADER, json={"plan": "vip"})
    assert checkout.status_code == 201
    assert checkout.json()["checkout_url"] == "https://checkout.test/cs_test_1"


def test_market_endpoints(client):
    price = client.get("/api/market/price", headers=TRADER).json()
    assert price == {"symbol": "XAUUSD", "price": 2650.0}
    assert client.get("/api/market/history", headers=TRADER).status_code == 403
    assert client.post("/api/monitor/run", headers=TRADER).status_code == 403


def test_trading_requires_vip(client):
    account = {"broker_name": "demo", "account_id": "demo123"}
    assert client.post("/api/trading/accounts", headers=TRADER, json=account).status_code == 403

    _make_vip(client)
    created = client.post("/api/trading/accounts", headers=TRADER, json=account)
    assert created.status_code == 201
    accounts = client.get("/api/trading/accounts", headers=TRADER).json()
    assert accounts["count"] == 1
    assert accounts["accounts"][0]["auto_trade_settings"]["enabled"] is False


def test_websocket_receives_price_updates(client):
    with client.websocket_connect("/ws") as ws:
        run = client.post("/api/monitor/run", headers=ADMIN)
        assert run.status_code == 200
        assert run.json()["price"] == 2650.0
        message = ws.receive_json()
    assert message["type"] == "price"
    assert message["data"]["price"] == 2650.0
