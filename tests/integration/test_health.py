"""Integration tests for health check endpoints."""

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        """Test that /health returns 200 with a healthy status."""
        response = client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["timestamp"] is not None
        assert data["version"] == "0.1.0"


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_readiness_returns_200_when_database_reachable(self, client: TestClient) -> None:
        """Test that /health/ready returns 200 when the database answers."""
        response = client.get("/health/ready")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert [check["name"] for check in data["checks"]] == ["database", "printful", "email"]

    def test_readiness_database_check_includes_latency(self, client: TestClient) -> None:
        """Test that the database check includes a latency measurement."""
        data = client.get("/health/ready").json()

        db_check = next(c for c in data["checks"] if c["name"] == "database")
        assert db_check["latency_ms"] is not None

    def test_readiness_reports_provider_configuration(self, client: TestClient) -> None:
        """Test that Printful and email report whether they are configured."""
        data = client.get("/health/ready").json()

        providers = {c["name"]: c for c in data["checks"] if c["name"] != "database"}
        assert providers["printful"]["configured"] is True
        assert providers["email"]["configured"] is True
        assert all(check["healthy"] for check in providers.values())

    def test_readiness_returns_503_when_database_unhealthy(self, mock_supabase_client: MagicMock) -> None:
        """Test that /health/ready returns 503 with the error when the database is down."""
        with patch(
            "src.api.routes.health.check_database_connection",
            return_value={"healthy": False, "error": "Connection timeout"},
        ):
            from src.main import app

            with TestClient(app) as test_client:
                response = test_client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        db_check = next(c for c in data["checks"] if c["name"] == "database")
        assert db_check["healthy"] is False
        assert db_check["error"] == "Connection timeout"


class TestErrorResponseSchema:
    """Tests for error response formatting."""

    def test_unexpected_error_returns_error_response(self, mock_supabase_client: MagicMock) -> None:
        """Test that an unhandled exception is formatted by the error middleware."""
        with patch(
            "src.api.routes.health.check_database_connection",
            side_effect=Exception("Test error"),
        ):
            from src.main import app

            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/health/ready", headers={"X-Request-ID": "req-123"})

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "internal_error"
        assert data["message"] == "An unexpected error occurred"
        assert data["request_id"] == "req-123"
        assert "timestamp" in data
