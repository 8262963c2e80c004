"""
Integration tests for the application shell: home page, health check,
correlation IDs and error pages.
"""

import pytest
from fastapi.testclient import TestClient

from abcretail import __version__
from abcretail.app import create_app
from abcretail.core.config_manager import AppConfig


class TestHome:
    def test_home_links_sections(self, client):
        response = client.get("/")

        assert response.status_code == 200
        for path in ("/table", "/blob", "/files", "/queue"):
            assert path in response.text
        assert __version__ in response.text

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": __version__,
            "resources": {
                "table": "CustomerProfiles",
                "blob_container": "product-images",
                "file_share": "contracts",
                "queue": "order-events",
            },
        }


class TestCorrelationId:
    def test_generated_when_absent(self, client):
        response = client.get("/health")

        assert response.headers["x-correlation-id"]

    def test_echoed_when_given(self, client):
        response = client.get("/health", headers={"x-correlation-id": "abc-123"})

        assert response.headers["x-correlation-id"] == "abc-123"


class TestErrors:
    def test_unexpected_error_is_500(self, app, container_client):
        container_client.failures["list_blob_names"] = RuntimeError("boom")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/blob")

        assert response.status_code == 500

    def test_unknown_route_is_404(self, client):
        assert client.get("/nowhere").status_code == 404


class TestLifespan:
    def test_missing_connection_string_fails_startup(self, monkeypatch):
        monkeypatch.delenv("AZURE_STORAGE_CONNECTION_STRING", raising=False)
        app = create_app(config=AppConfig())

        with pytest.raises(Exception):
            with TestClient(app):
                pass

    def test_provided_storage_is_not_closed(self, app, storage, table_client):
        with TestClient(app):
            pass

        assert app.state.storage is storage
        assert not table_client.closed
