from fastapi.testclient import TestClient

from app.main import create_app
from conftest import FakeTelegramService, make_settings


def test_root_is_liveness_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Bot + API online"


def test_webapp_redirects(client):
    response = client.get("/webapp", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://t.me/relay_bot/app"


def test_website_missing(client):
    response = client.get("/website", follow_redirects=False)
    assert response.status_code == 500
    assert response.text == "WEBSITE_URL missing"


def test_health_counts(client):
    client.post("/api/log-code", json={"code": "1", "tgUser": {"id": 42}})

    data = client.get("/health").json()

    assert data["status"] == "healthy"
    assert data["pending_submissions"] == 1
    assert data["active_timers"] == 1


def test_process_time_header():
    app = create_app(make_settings(), FakeTelegramService())
    with TestClient(app) as client:
        assert "x-process-time" in client.get("/").headers
