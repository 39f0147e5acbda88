"""Tests for the health endpoint."""

import pytest
from fastapi.testclient import TestClient

from api.app import create_app

from tests.factories import make_settings


@pytest.fixture
def client():
    return TestClient(create_app(make_settings()))


class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        """Health endpoint should return ok status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_needs_no_configuration(self):
        """Health must not depend on secrets or the database."""
        client = TestClient(create_app(make_settings(
            jwt_secret="",
            supabase_url="",
            stripe_secret_key="",
        )))
        assert client.get("/health").status_code == 200
