"""Tests for the liveness and database check endpoints."""

from pathlib import Path

from fastapi.testclient import TestClient

from soundbridge.config import DatabaseSettings, Settings
from soundbridge.main import create_app


class TestRoot:
    """GET /"""

    def test_returns_plaintext_liveness(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Server running ✅"


class TestDbTest:
    """GET /db-test"""

    def test_success_returns_server_time(self, client: TestClient) -> None:
        response = client.get("/db-test")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["time"]

    def test_unreachable_database_returns_generic_500(
        self, settings: Settings, tmp_path: Path
    ) -> None:
        missing_dir = tmp_path / "does-not-exist"
        broken = settings.model_copy(
            update={
                "database": DatabaseSettings(
                    url=f"sqlite+aiosqlite:///{missing_dir}/app.db"
                )
            }
        )

        with TestClient(create_app(broken)) as client:
            response = client.get("/db-test")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Database connection failed",
        }
