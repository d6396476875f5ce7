"""Unit tests for RequestLoggingMiddleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from soundbridge.infrastructure.observability.middleware import RequestLoggingMiddleware

MIDDLEWARE = "soundbridge.infrastructure.observability.middleware"


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create a FastAPI app with middleware for testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"message": "test"}

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        """Create a test client."""
        return TestClient(app)

    def test_successful_request_logs_completion(self, client: TestClient):
        """Test that successful requests log completion with status and duration."""
        with patch(f"{MIDDLEWARE}.logger") as mock_logger:
            response = client.get("/test")

            assert response.status_code == 200
            assert mock_logger.info.call_count == 1

            log_message = mock_logger.info.call_args_list[0][0][0]
            assert "GET" in log_message
            assert "/test" in log_message
            assert "200" in log_message
            assert "ms" in log_message

    def test_query_string_is_not_logged(self, client: TestClient):
        """Session codes travel in query strings and must stay out of the logs."""
        with patch(f"{MIDDLEWARE}.logger") as mock_logger:
            client.get("/test?code=secret-session-code")

            call = mock_logger.info.call_args_list[0]
            assert "secret-session-code" not in call[0][0]
            assert "secret-session-code" not in str(call[1]["extra"])

    def test_request_with_correlation_id_header(self, client: TestClient):
        """Test request with X-Correlation-ID header."""
        with (
            patch(f"{MIDDLEWARE}.set_correlation_id") as mock_set_correlation_id,
            patch(f"{MIDDLEWARE}.get_correlation_id", return_value="test-correlation-id"),
        ):
            response = client.get(
                "/test", headers={"X-Correlation-ID": "custom-correlation-id"}
            )

            assert response.status_code == 200
            mock_set_correlation_id.assert_called_once_with("custom-correlation-id")
            assert response.headers["X-Correlation-ID"] == "test-correlation-id"

    def test_request_without_correlation_id_header(self, client: TestClient):
        """Test request without X-Correlation-ID header generates one."""
        response = client.get("/test")

        assert response.status_code == 200
        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_error_request_logs_exception(self, client: TestClient):
        """Test that failed requests log exception details."""
        with patch(f"{MIDDLEWARE}.logger") as mock_logger:
            with pytest.raises(ValueError):
                client.get("/error")

            assert mock_logger.exception.call_count == 1
            log_message = mock_logger.exception.call_args[0][0]
            assert "GET" in log_message
            assert "/error" in log_message
            assert "FAILED" in log_message

    def test_multiple_requests_independent_logging(self, client: TestClient):
        """Test that multiple requests are logged independently."""
        with patch(f"{MIDDLEWARE}.logger") as mock_logger:
            client.get("/test")
            client.get("/test")
            client.get("/test?param=value")

            assert mock_logger.info.call_count == 3
