"""
Tests for the FastAPI outfit generator.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from config.constants import (
    DATA_ACCESS_FAILURE_MESSAGE,
    ENDPOINT_NOT_FOUND_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    PRODUCTS_REQUIRED_MESSAGE,
)

pytestmark = pytest.mark.api


class TestHealthEndpoint:
    """Tests for health check endpoints"""

    def test_health_check(self, client):
        """Test health endpoint returns 200"""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "outfit-generator"

    def test_liveness(self, client):
        response = client.get("/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated(self, client):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")


class TestModelsEndpoint:
    """Tests for GET /models"""

    def test_lists_models(self, client):
        response = client.get("/models")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [m["id"] for m in data["models"]][0] == "random"
        assert len(data["models"]) == 6


class TestGenerateEndpoint:
    """Tests for POST /generate"""

    def test_generate_success(self, client):
        response = client.post("/generate", json={"products": ["p1"]})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        outfit = data["outfit"]
        assert outfit["id"].startswith("outfit_")
        assert outfit["metadata"]["total_pieces"] == 3
        assert outfit["metadata"]["generation_model"] == "random"
        assert outfit["source"] == "general"
        assert outfit["products"][0]["product_id"] == "p1"
        assert outfit["products"][0]["match_reason"] == "input"

    def test_generate_with_user(self, client):
        response = client.post("/generate", json={"products": ["p1", "mine"], "userId": "u1"})
        assert response.status_code == 200
        outfit = response.json()["outfit"]
        assert outfit["source"] == "mixed"
        assert outfit["metadata"]["data_sources"] == {"general": 1, "user": 2}
        assert outfit["products"][1]["privacy"] == "private"

    def test_generate_with_max_pieces(self, client):
        response = client.post(
            "/generate",
            json={"products": ["p1", "p2", "p3"], "options": {"maxPieces": 2}},
        )
        assert response.status_code == 200
        assert response.json()["outfit"]["metadata"]["total_pieces"] == 2

    def test_legacy_route(self, client):
        response = client.post("/outfit_generator", json={"products": ["p2"]})
        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.parametrize("body", [{}, {"products": []}, {"products": None}, {"products": "p1"}])
    def test_products_required(self, client, body):
        response = client.post("/generate", json=body)
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": PRODUCTS_REQUIRED_MESSAGE,
            "outfit": None,
        }

    def test_missing_body(self, client):
        response = client.post("/generate")
        assert response.status_code == 400
        assert response.json()["error"] == PRODUCTS_REQUIRED_MESSAGE

    def test_negative_max_pieces(self, client):
        response = client.post("/generate", json={"products": ["p1"], "options": {"maxPieces": -1}})
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"].startswith("Invalid request: options.maxPieces")

    def test_invalid_model(self, client, fake_catalog):
        response = client.post("/generate", json={"products": ["p1"], "options": {"model": "magic"}})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid model: magic", "outfit": None}
        assert fake_catalog.sessions_opened == 0

    def test_unimplemented_model(self, client):
        response = client.post("/generate", json={"products": ["p1"], "options": {"model": "ai_model_1"}})
        assert response.status_code == 400
        assert response.json()["error"] == "ai_model_1 not yet implemented. Use 'random'"

    def test_catalog_failure(self, client, fake_catalog):
        fake_catalog.fail_on_connect = True
        response = client.post("/generate", json={"products": ["p1"]})
        assert response.status_code == 400
        assert response.json()["error"] == DATA_ACCESS_FAILURE_MESSAGE


class TestErrorEnvelopes:
    """Tests for errors outside the generation pipeline"""

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": ENDPOINT_NOT_FOUND_MESSAGE, "outfit": None}

    def test_wrong_method_is_not_found(self, client):
        response = client.get("/generate")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": ENDPOINT_NOT_FOUND_MESSAGE, "outfit": None}

    def test_wrong_method_on_models(self, client):
        response = client.post("/models", json={})
        assert response.status_code == 404
        assert response.json()["error"] == ENDPOINT_NOT_FOUND_MESSAGE

    def test_unexpected_error(self, app):
        broken = MagicMock()
        broken.assemble.side_effect = RuntimeError("boom")
        from services.outfit_assembler import get_outfit_assembler
        app.dependency_overrides[get_outfit_assembler] = lambda: broken

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.post("/generate", json={"products": ["p1"]})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": INTERNAL_ERROR_MESSAGE, "outfit": None}
