import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from tenant_notes.database import InMemoryNoteStore, TransientStorageError
from tenant_notes.dependencies import get_note_store, get_principal


def _as(org_id: str = "org1", user_id: str = "u1", roles: str = "owner") -> dict:
    return {"X-Org-Id": org_id, "X-User-Id": user_id, "X-User-Roles": roles}


def _create(client, headers=None, **body):
    payload = {"title": "T", "content": "C", **body}
    return client.post("/api/notes", json=payload, headers=headers or _as())


def test_health_reports_store_backend(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["store"] == "inmemory"


def test_requests_without_identity_are_rejected(client):
    assert client.get("/api/notes").status_code == 401
    assert client.get("/api/notes", headers={"X-Org-Id": "org1"}).status_code == 401


def test_unknown_role_is_rejected(client):
    response = client.get("/api/notes", headers=_as(roles="owner,superuser"))

    assert response.status_code == 401


def test_note_crud_flow(client):
    created = _create(client)
    assert created.status_code == 201
    note = created.json()
    assert note["org_id"] == "org1"
    assert note["user_id"] == "u1"
    assert note["created_at"] == note["updated_at"]

    patched = client.patch(f"/api/notes/{note['id']}", json={"title": "T2"}, headers=_as())
    assert patched.status_code == 200
    assert patched.json()["title"] == "T2"
    assert patched.json()["content"] == "C"

    listed = client.get("/api/notes", headers=_as())
    assert [n["id"] for n in listed.json()] == [note["id"]]

    deleted = client.delete(f"/api/notes/{note['id']}", headers=_as())
    assert deleted.json() == {"status": "deleted", "id": note["id"]}
    assert client.get(f"/api/notes/{note['id']}", headers=_as()).status_code == 404
    assert client.delete(f"/api/notes/{note['id']}", headers=_as()).status_code == 404


def test_body_cannot_choose_the_acting_tenant(client):
    note = _create(client, org_id="org2", user_id="intruder").json()

    assert note["org_id"] == "org1"
    assert note["user_id"] == "u1"


def test_other_tenant_gets_not_found_everywhere(client):
    note_id = _create(client).json()["id"]
    other = _as(org_id="org2")

    assert client.get(f"/api/notes/{note_id}", headers=other).status_code == 404
    assert client.patch(f"/api/notes/{note_id}", json={"title": "x"}, headers=other).status_code == 404
    assert client.delete(f"/api/notes/{note_id}", headers=other).status_code == 404
    assert client.get("/api/notes", params={"scope": "org"}, headers=other).json() == []
    assert client.get(f"/api/notes/{note_id}", headers=_as()).json()["title"] == "T"


def test_scope_selects_user_or_org_listing(client):
    mine = _create(client).json()
    theirs = _create(client, headers=_as(user_id="u2")).json()

    own = client.get("/api/notes", headers=_as()).json()
    org = client.get("/api/notes", params={"scope": "org"}, headers=_as()).json()

    assert [n["id"] for n in own] == [mine["id"]]
    assert [n["id"] for n in org] == [theirs["id"], mine["id"]]


def test_subject_filter_tracks_subject_changes(client):
    note_id = _create(client, subject_id="case-1").json()["id"]
    by_subject = {"scope": "org", "subject_id": "case-1"}

    assert [n["id"] for n in client.get("/api/notes", params=by_subject, headers=_as()).json()] == [note_id]

    cleared = client.patch(f"/api/notes/{note_id}", json={"subject_id": None}, headers=_as())
    assert cleared.json()["subject_id"] is None
    assert client.get("/api/notes", params=by_subject, headers=_as()).json() == []


def test_invalid_payloads_are_rejected(client):
    assert _create(client, title="").status_code == 422
    assert client.post("/api/notes", json={"title": "T"}, headers=_as()).status_code == 422
    assert client.get("/api/notes", params={"scope": "everyone"}, headers=_as()).status_code == 422


class _UnavailableStore(InMemoryNoteStore):
    async def list_notes_by_user(self, org_id, user_id):
        raise TransientStorageError("DynamoDB query failed: ThrottlingException")


def test_transient_storage_failure_maps_to_503(app):
    app.dependency_overrides[get_note_store] = lambda: _UnavailableStore()
    with TestClient(app) as client:
        response = client.get("/api/notes", headers=_as())

    assert response.status_code == 503
    assert response.json() == {"detail": "Storage temporarily unavailable"}


def test_duplicate_generated_id_maps_to_409(app):
    colliding = InMemoryNoteStore(id_factory=lambda: "fixed")
    app.dependency_overrides[get_note_store] = lambda: colliding
    with TestClient(app) as client:
        assert _create(client).status_code == 201
        response = _create(client)

    assert response.status_code == 409


def test_unknown_role_keeps_the_parse_error_as_cause():
    with pytest.raises(HTTPException) as excinfo:
        get_principal(x_org_id="org1", x_user_id="u1", x_user_roles="owner,superuser")

    assert excinfo.value.status_code == 401
    assert isinstance(excinfo.value.__cause__, ValueError)
