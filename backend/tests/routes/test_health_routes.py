from fastapi.testclient import TestClient


def test_root_describes_the_api(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["docs"] == "/docs"
    assert body["environment"] == "test"


def test_health_reports_online_users(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["online_users"] == 0


def test_metrics_exposes_prometheus_text(client: TestClient, auth_headers) -> None:
    client.get("/api/contacts", headers=auth_headers)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "agora_realtime_connections" in response.text
    assert "agora_service_operation_duration_seconds" in response.text


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}
