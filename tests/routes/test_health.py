"""
Tests for GET /health.
"""

from fastapi.testclient import TestClient

from voltstore.main import app


def test_health_is_public():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
