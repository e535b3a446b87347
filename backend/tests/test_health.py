from fastapi.testclient import TestClient


def _get_client() -> TestClient:
    from app.main import app

    return TestClient(app)


def test_health_endpoint_returns_ok() -> None:
    response = _get_client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_generated_and_echoed() -> None:
    client = _get_client()

    generated = client.get("/health")
    echoed = client.get("/health", headers={"X-Request-Id": "req-123", "X-Interview-Session": "s1"})

    assert generated.headers.get("X-Request-Id")
    assert echoed.headers.get("X-Request-Id") == "req-123"
