"""Integration tests for API endpoints"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration

ADA = {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "+15551234567"}


def create_client(api_client: TestClient, **overrides) -> dict:
    response = api_client.post("/v1/clients", json={**ADA, **overrides})
    assert response.status_code == 201
    return response.json()["data"]


def create_payment(api_client: TestClient, client_id: str, **overrides) -> dict:
    body = {
        "client_id": client_id,
        "amount": 250,
        "description": "Logo design",
        "due_date": (date.today() + timedelta(days=14)).isoformat(),
        "communication_method": "both",
        **overrides,
    }
    return api_client.post("/v1/payments", json=body)


def test_health_endpoint(api_client: TestClient):
    """Test health check endpoint"""
    response = api_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["providers"] == {"sms": "mock", "email": "mock", "payment_gateway": "mock", "ai": "mock"}


def test_metrics_endpoint(api_client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = api_client.get("/metrics")
    assert response.status_code == 200
    assert "paywise_payment_requests_total" in response.text


def test_request_id_is_echoed(api_client: TestClient):
    response = api_client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert api_client.get("/health").headers["X-Request-ID"]


def test_create_client(api_client: TestClient):
    """Test a new client is stored with placeholder history and AI fields"""
    response = api_client.post("/v1/clients", json=ADA)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["warnings"] == []
    data = body["data"]
    assert data["id"].startswith("client_")
    assert data["payment_history"] == "No payment history."
    assert data["transactions"] == []
    assert data["prediction_score"] == 42.0
    assert data["risk_factors"] == "Few late payments"
    assert data["payment_summary"] == "Pays reliably"


def test_create_client_missing_field(api_client: TestClient):
    response = api_client.post("/v1/clients", json={"name": "Ada", "email": "ada@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "phone" in body["error"]
    assert api_client.get("/v1/clients").json()["data"] == []


def test_create_client_ai_failure_still_creates(api_client: TestClient, providers):
    """Test the model being down is a warning, not an error"""
    providers.ai.fail_prediction = True

    response = api_client.post("/v1/clients", json=ADA)

    assert response.status_code == 201
    body = response.json()
    assert body["data"]["prediction_score"] is None
    assert body["data"]["payment_summary"] is None
    assert len(body["warnings"]) == 1


def test_client_lifecycle(api_client: TestClient):
    client = create_client(api_client)

    fetched = api_client.get(f"/v1/clients/{client['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["name"] == "Ada Lovelace"

    updated = api_client.put(f"/v1/clients/{client['id']}", json={"phone": "+15559999999"})
    assert updated.status_code == 200
    assert updated.json()["data"]["phone"] == "+15559999999"
    assert updated.json()["data"]["email"] == "ada@example.com"

    deleted = api_client.delete(f"/v1/clients/{client['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Client deleted successfully"
    assert client["id"] not in [c["id"] for c in api_client.get("/v1/clients").json()["data"]]

    missing = api_client.get(f"/v1/clients/{client['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Client not found"
    assert api_client.delete(f"/v1/clients/{client['id']}").status_code == 404


def test_list_clients_in_insertion_order(api_client: TestClient):
    for name in ["Charlie", "Alice", "Bob"]:
        create_client(api_client, name=name)

    names = [c["name"] for c in api_client.get("/v1/clients").json()["data"]]
    assert names == ["Charlie", "Alice", "Bob"]


def test_refresh_ai(api_client: TestClient, providers):
    client = create_client(api_client)
    providers.ai.score = 73.0

    for _ in range(2):
        response = api_client.post(f"/v1/clients/{client['id']}/refresh-ai")
        assert response.status_code == 200
        score = response.json()["data"]["prediction_score"]
        assert 0 <= score <= 100

    assert score == 73.0


def test_refresh_ai_unknown_client(api_client: TestClient):
    response = api_client.post("/v1/clients/client_missing/refresh-ai")
    assert response.status_code == 404


def test_refresh_ai_failure(api_client: TestClient, providers):
    client = create_client(api_client)
    providers.ai.fail_summary = True

    response = api_client.post(f"/v1/clients/{client['id']}/refresh-ai")

    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to refresh AI insights")
    assert api_client.get(f"/v1/clients/{client['id']}").json()["data"]["payment_summary"] == "Pays reliably"


def test_create_payment(api_client: TestClient, providers):
    """Test link creation, persistence and both notifications"""
    client = create_client(api_client)

    response = create_payment(api_client, client["id"])

    assert response.status_code == 201
    body = response.json()
    data = body["data"]
    assert data["id"].startswith("payment_")
    assert data["status"] == "link_sent"
    assert data["payment_link_url"] == "https://pay.example.test/link/abc"
    assert data["client_id"] == client["id"]
    assert data["client_name"] == "Ada Lovelace"
    assert body["message"] == "Payment link created for Ada Lovelace. SMS sent. Email sent."
    assert body["warnings"] == []
    assert len(providers.sms.sent) == 1
    assert len(providers.email.sent) == 1


def test_create_payment_unknown_client(api_client: TestClient, providers):
    response = create_payment(api_client, "client_missing")

    assert response.status_code == 404
    assert response.json()["error"] == "Client not found"
    assert providers.link.requests == []
    assert api_client.get("/v1/payments").json()["data"] == []


def test_create_payment_invalid_body(api_client: TestClient):
    client = create_client(api_client)

    response = create_payment(api_client, client["id"], amount=-5, communication_method="pigeon")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")


def test_create_payment_sms_failure(api_client: TestClient, providers):
    """Test a failed channel still returns the created payment"""
    client = create_client(api_client)
    providers.sms.fail = True

    response = create_payment(api_client, client["id"])

    assert response.status_code == 201
    body = response.json()
    assert body["data"]["status"] == "link_sent"
    assert "SMS failed." in body["message"]
    assert body["warnings"] == ["SMS notification failed"]
    assert len(api_client.get("/v1/payments").json()["data"]) == 1


def test_create_payment_link_failure(api_client: TestClient, providers):
    client = create_client(api_client)
    providers.link.fail = True

    response = create_payment(api_client, client["id"])

    assert response.status_code == 502
    assert response.json()["error"].startswith("Failed to create payment request")
    assert api_client.get("/v1/payments").json()["data"] == []
    assert providers.sms.sent == []


def test_update_payment_status_paid(api_client: TestClient):
    """Test paying a request adds a transaction to the client"""
    client = create_client(api_client)
    payment = create_payment(api_client, client["id"]).json()["data"]

    response = api_client.put(f"/v1/payments/{payment['id']}/status", json={"status": "paid"})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "paid"
    assert response.json()["message"] == "Status changed from link_sent to paid"
    refreshed = api_client.get(f"/v1/clients/{client['id']}").json()["data"]
    assert len(refreshed["transactions"]) == 1
    assert refreshed["transactions"][0]["status"] == "paid"
    assert "Desc: Payment for request: Logo design" in refreshed["payment_history"]


def test_update_payment_status_errors(api_client: TestClient):
    client = create_client(api_client)
    payment = create_payment(api_client, client["id"]).json()["data"]

    assert api_client.put(f"/v1/payments/{payment['id']}/status", json={}).status_code == 400
    assert api_client.put(f"/v1/payments/{payment['id']}/status", json={"status": "lost"}).status_code == 400
    missing = api_client.put("/v1/payments/payment_missing/status", json={"status": "paid"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Payment not found"


def test_get_payment_and_client_payments(api_client: TestClient):
    ada = create_client(api_client)
    bob = create_client(api_client, name="Bob", email="bob@example.com")
    first = create_payment(api_client, ada["id"], amount=10).json()["data"]
    create_payment(api_client, bob["id"], amount=20)

    assert api_client.get(f"/v1/payments/{first['id']}").json()["data"]["amount"] == 10
    assert api_client.get("/v1/payments/payment_missing").status_code == 404
    amounts = [p["amount"] for p in api_client.get(f"/v1/clients/{ada['id']}/payments").json()["data"]]
    assert amounts == [10]
    assert api_client.get("/v1/clients/client_missing/payments").status_code == 404


def test_expire_overdue(api_client: TestClient):
    client = create_client(api_client)
    late = create_payment(api_client, client["id"], due_date=(date.today() - timedelta(days=2)).isoformat())
    create_payment(api_client, client["id"])

    response = api_client.post("/v1/payments/expire-overdue")

    assert response.status_code == 200
    expired = response.json()["data"]
    assert [p["id"] for p in expired] == [late.json()["data"]["id"]]
    assert expired[0]["status"] == "expired"


def test_dashboard_summary(api_client: TestClient):
    client = create_client(api_client)
    paid = create_payment(api_client, client["id"], amount=100).json()["data"]
    create_payment(api_client, client["id"], amount=40)
    api_client.put(f"/v1/payments/{paid['id']}/status", json={"status": "paid"})

    response = api_client.get("/v1/dashboard/summary")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_income"] == 100
    assert data["pending_dues"] == 40
    assert data["pending_count"] == 1
    assert data["client_count"] == 1
    assert data["payment_count"] == 2
    assert data["average_prediction_score"] == 42.0
    assert data["risk_distribution"]["medium"] == 1
    assert data["unscored_clients"] == 0
