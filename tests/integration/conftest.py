"""Integration test fixtures: the HTTP app and sample files on disk."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from typepredictor.api.app import create_app
from tests.fakes import USERS


@pytest.fixture
def client(monkeypatch):
    """TestClient with the lifespan run, so settings are loaded from the environment."""
    monkeypatch.setenv("TYPEPREDICTOR_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TYPEPREDICTOR_ENVIRONMENT", "uat")
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps(USERS), encoding="utf-8")
    return path


@pytest.fixture
def users_jsonl(tmp_path):
    path = tmp_path / "users.jsonl"
    path.write_text("\n".join(json.dumps(user) for user in USERS) + "\n", encoding="utf-8")
    return path
