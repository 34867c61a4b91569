"""
Integration tests for System API endpoints.

Tests health check and system status.
"""

import pytest


class TestHealthCheck:
    """Tests for system health endpoints."""

    @pytest.mark.api
    def test_health_endpoint(self, api_client):
        """Test /health endpoint."""
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "chat-auth-api"

    @pytest.mark.api
    def test_root_endpoint(self, api_client):
        """Test root endpoint."""
        response = api_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Chat Auth API"
        assert "version" in data

    @pytest.mark.api
    def test_system_status(self, api_client):
        """Test /api/v1/system/status endpoint."""
        response = api_client.get("/api/v1/system/status")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.api
    def test_openapi_json(self, api_client):
        """Test OpenAPI JSON endpoint."""
        response = api_client.get("/openapi.json")

        assert response.status_code == 200
        data = response.json()
        assert "/api/v1/auth/signup" in data["paths"]
        assert "/api/v1/auth/login" in data["paths"]
