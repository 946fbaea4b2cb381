"""
JSON endpoints and app wiring (health, error bodies).
"""

from fastapi.testclient import TestClient

from fxdesk.core.config import Settings
from fxdesk.main import create_app


def test_list_rates(client):
    resp = client.get("/api/rates")
    assert resp.status_code == 200
    body = resp.json()
    assert body["base"] == "USD"
    assert list(body["rates"]) == ["USD", "EUR", "JPY"]


def test_convert(client):
    resp = client.get("/api/convert", params={"amount": 100, "from": "eur", "to": "JPY"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"] == 16666.6667
    assert body["from_currency"] == "EUR"


def test_convert_unknown_currency(client):
    resp = client.get("/api/convert", params={"amount": 10, "from": "USD", "to": "XYZ"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Unknown currency: XYZ"


def test_convert_rejects_non_positive_amount(client):
    resp = client.get("/api/convert", params={"amount": 0, "from": "USD", "to": "EUR"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_unknown_route(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not_found", "detail": "No route for GET /nope"}


def test_health_ok(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["rates_loaded"] == "loaded"
    assert body["currencies"] == 3


def test_health_degraded_when_file_missing(tmp_path):
    app = create_app(Settings(data_dir=tmp_path, rates_filename="missing.json"))
    body = TestClient(app).get("/health").json()
    assert body["status"] == "degraded"
    assert body["rates_loaded"] == "failed"
    assert body["currencies"] == 0


def test_convert_overflow_is_a_client_error(client):
    resp = client.get("/api/convert", params={"amount": 1e307, "from": "USD", "to": "JPY"})
    assert resp.status_code == 400
    assert "out of range" in resp.json()["detail"]
