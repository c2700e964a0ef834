import logging

import pytest

from tenant_notes.config import Settings
from tenant_notes.database import (
    DynamoNoteStore,
    InMemoryNoteStore,
    NoteStoreProvider,
    StoreConfigurationError,
    build_note_store,
)
from tenant_notes.models import NoteCreate, StoreBackend


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults_to_in_memory_store():
    assert isinstance(build_note_store(_settings()), InMemoryNoteStore)


@pytest.mark.parametrize("name", ["dynamodb", "Dynamo", " DYNAMODB "])
def test_dynamodb_store_is_selected_by_name_or_alias(name):
    store = build_note_store(
        _settings(NOTES_STORE=name, DYNAMODB_TABLE_NAME="notes", AWS_REGION="eu-west-1")
    )

    assert isinstance(store, DynamoNoteStore)
    assert store.backend is StoreBackend.DYNAMODB
    assert store.table_name == "notes"
    assert store.client.meta.region_name == "eu-west-1"


def test_endpoint_override_is_passed_to_client():
    store = build_note_store(
        _settings(
            NOTES_STORE="dynamodb",
            DYNAMODB_TABLE_NAME="notes",
            AWS_REGION="us-east-1",
            DYNAMODB_ENDPOINT_URL="http://localhost:8000",
        )
    )

    assert store.client.meta.endpoint_url == "http://localhost:8000"


def test_dynamodb_client_makes_a_single_attempt_by_default():
    store = build_note_store(
        _settings(NOTES_STORE="dynamodb", DYNAMODB_TABLE_NAME="notes", AWS_REGION="us-east-1")
    )

    assert store.client.meta.config.retries["total_max_attempts"] == 1
    assert "max_attempts" not in store.client.meta.config.retries


def test_unknown_backend_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="tenant_notes.database.factory"):
        store = build_note_store(_settings(NOTES_STORE="redis"))

    assert isinstance(store, InMemoryNoteStore)
    assert "Unknown NOTES_STORE 'redis'" in caplog.text


@pytest.mark.parametrize(
    "overrides, missing",
    [
        ({"AWS_REGION": "us-east-1"}, "DYNAMODB_TABLE_NAME"),
        ({"DYNAMODB_TABLE_NAME": "notes"}, "AWS_REGION"),
    ],
)
def test_dynamodb_without_required_settings_is_fatal(overrides, missing):
    with pytest.raises(StoreConfigurationError, match=missing):
        build_note_store(_settings(NOTES_STORE="dynamodb", **overrides))


def test_provider_builds_lazily_and_reuses_the_instance(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "tenant_notes.database.factory.InMemoryNoteStore",
        lambda: calls.append(1) or InMemoryNoteStore(),
    )
    provider = NoteStoreProvider(_settings())
    assert calls == []

    first = provider.get()

    assert provider.get() is first
    assert calls == [1]


async def test_reset_forces_a_fresh_store():
    provider = NoteStoreProvider(_settings())
    store = provider.get()
    await store.create_note("org1", "u1", NoteCreate(title="T", content="C"))

    provider.reset()
    rebuilt = provider.get()

    assert rebuilt is not store
    assert await rebuilt.list_notes_by_org("org1") == []