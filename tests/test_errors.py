from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.core.exceptions import SubmissionNotFoundError
from app.main import create_app
from conftest import make_settings


def make_client():
    app = create_app(make_settings(), telegram=None)
    return app, TestClient(app, raise_server_exceptions=False)


def test_404_not_found():
    _, client = make_client()
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["ok"] is False
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    app, client = make_client()

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert len(data["details"]) > 0

def test_custom_exception():
    app, client = make_client()

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise SubmissionNotFoundError()

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Not found or expired"

def test_unhandled_exception():
    app, client = make_client()

    @app.get("/test-crash")
    def crash():
        raise RuntimeError("kaboom")

    response = client.get("/test-crash")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
