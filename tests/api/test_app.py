"""
Tests for application-level behaviour: health, envelopes, error handling.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.main import create_app
from catalog.store import EntityStore


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert data["authors"] == 3
    assert data["books"] == 5
    assert "timestamp" in data


def test_error_envelope_shape(client):
    response = client.get("/books/404")
    body = response.json()
    assert body["success"] is False
    error = body["error"]
    assert set(error) == {"message", "statusCode", "errorCode", "timestamp", "path", "method"}
    assert error["statusCode"] == 404
    assert error["path"] == "/books/404"
    assert error["method"] == "GET"
    datetime.fromisoformat(error["timestamp"].replace("Z", "+00:00"))


def test_unknown_route(client):
    response = client.get("/publishers")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["errorCode"] == "ROUTE_NOT_FOUND"
    assert error["message"] == "Route /publishers not found"


def test_request_id_header_echoed(client):
    response = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert response.headers["X-Request-Id"] == "abc-123"


def test_request_id_generated(client):
    assert client.get("/health").headers.get("X-Request-Id")


class ExplodingStore(EntityStore):
    def snapshot(self):
        raise RuntimeError("disk on fire")


@pytest.mark.parametrize("debug", [False, True])
def test_unhandled_errors_become_500(debug):
    settings = APIConfig(_env_file=None, debug=debug)
    app = create_app(settings=settings, store=ExplodingStore())
    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/books")
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["errorCode"] == "INTERNAL_SERVER_ERROR"
    if debug:
        assert error["message"] == "disk on fire"
        assert "RuntimeError" in error["stack"]
    else:
        assert error["message"] == "Internal Server Error"
        assert "stack" not in error


def test_unhandled_error_response_keeps_request_id():
    app = create_app(settings=APIConfig(_env_file=None), store=ExplodingStore())
    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/books", headers={"X-Request-Id": "req-500"})
    assert response.status_code == 500
    assert response.headers["X-Request-Id"] == "req-500"
    assert client.get("/books").headers.get("X-Request-Id")


def test_seed_sample_data_flag():
    seeded = create_app(settings=APIConfig(_env_file=None, seed_sample_data=True))
    empty = create_app(settings=APIConfig(_env_file=None, seed_sample_data=False))
    assert seeded.state.store.counts() == {"authors": 3, "books": 5}
    assert empty.state.store.counts() == {"authors": 0, "books": 0}


def test_apps_do_not_share_stores():
    first = TestClient(create_app(settings=APIConfig(_env_file=None)))
    second = TestClient(create_app(settings=APIConfig(_env_file=None)))
    first.delete("/books/1")
    assert second.get("/books/1").status_code == 200
