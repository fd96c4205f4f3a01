"""HTTP surface: health, predict, analyze and validate."""

from __future__ import annotations

import inspect

import jsonschema
import pytest
from fastapi.testclient import TestClient

from typepredictor.api.app import create_app
from typepredictor.api.routes import inference
from tests.fakes import API_RESPONSE, USERS


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "type-predictor"}

    def test_ready_reports_loaded_settings(self, client):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "environment": "uat", "max_depth": 100}

    def test_not_ready_before_lifespan(self):
        # Without the context manager the lifespan never runs.
        response = TestClient(create_app()).get("/ready")
        assert response.status_code == 503
        assert response.json() == {"detail": "Settings not loaded"}

    def test_health_answers_without_lifespan(self):
        assert TestClient(create_app()).get("/health").status_code == 200

    def test_settings_loaded_by_lifespan(self, client):
        assert client.app.state.settings.log_level == "DEBUG"


class TestPredict:
    def test_returns_label_and_json_schema(self, client):
        response = client.post("/predict", json={"documents": [{"v": "a"}, {"v": None}]})
        assert response.status_code == 200
        body = response.json()
        assert body["label"] == "{ v: string | null }"
        jsonschema.validate({"v": None}, body["json_schema"])

    def test_exported_schema_accepts_sample(self, client):
        body = client.post("/predict", json={"documents": [API_RESPONSE]}).json()
        jsonschema.validate(API_RESPONSE, body["json_schema"])

    def test_requires_documents(self, client):
        response = client.post("/predict", json={"documents": []})
        assert response.status_code == 422


class TestAnalyze:
    def test_report(self, client):
        response = client.post("/analyze", json={"documents": USERS})
        assert response.status_code == 200
        report = response.json()
        assert report["structure"]["kind"] == "object"
        predictions = {entry["path"]: entry for entry in report["predictions"]}
        assert predictions["status"]["enum_values"] == ["active", "inactive", "pending"]
        assert predictions["name"]["nullable"] is True


class TestValidate:
    def test_valid_document(self, client):
        response = client.post("/validate", json={"samples": USERS, "document": USERS[0]})
        assert response.status_code == 200
        assert response.json() == {"success": True, "issues": []}

    def test_invalid_document_lists_issues(self, client):
        document = {"id": "9", "status": "deleted", "extra": 1}
        body = client.post("/validate", json={"samples": USERS, "document": document}).json()
        assert body["success"] is False
        paths = {issue["path"] for issue in body["issues"]}
        assert paths == {"id", "name", "status", "extra"}


class TestHandlersOffEventLoop:
    @pytest.mark.parametrize("handler", [inference.predict, inference.analyze, inference.validate])
    def test_inference_handlers_are_sync(self, handler):
        assert not inspect.iscoroutinefunction(handler)
