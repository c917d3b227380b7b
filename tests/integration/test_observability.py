"""Integration tests for health, readiness, metrics and request IDs"""

from fastapi.testclient import TestClient


def test_health_reports_components(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["database"]["status"] == "healthy"
    assert "upload_dir" in data["components"]


def test_ready(client: TestClient):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_metrics_exposes_workflow_counters(owner_client: TestClient):
    owner_client.get("/api/v1/documents/999")

    response = owner_client.get("/metrics")

    assert response.status_code == 200
    assert "docflow_workflow_denials_total" in response.text
    assert "docflow_document_mutations_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"


def test_request_id_is_generated(client: TestClient):
    response = client.get("/api/v1")

    assert len(response.headers["X-Request-ID"]) == 32
