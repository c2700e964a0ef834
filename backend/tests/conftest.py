import pytest
from fastapi.testclient import TestClient

from tenant_notes.app import create_app
from tenant_notes.config import Settings
from tenant_notes.database import InMemoryNoteStore


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    for name in ("AWS_REGION", "NOTES_STORE", "DYNAMODB_TABLE_NAME", "DYNAMODB_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store():
    return InMemoryNoteStore()


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, NOTES_STORE="inmemory")


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
