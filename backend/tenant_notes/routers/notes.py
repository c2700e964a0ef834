"""Note routes."""

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from tenant_notes.database import DuplicateNoteIdError
from tenant_notes.dependencies import NoteStoreDep, PrincipalDep
from tenant_notes.logging import get_logger
from tenant_notes.models import Note, NoteCreate, NoteUpdate

logger = get_logger('routers.notes')

router = APIRouter()


@router.post("", response_model=Note, status_code=201)
async def create_note(body: NoteCreate, principal: PrincipalDep, store: NoteStoreDep):
    try:
        return await store.create_note(principal.org_id, principal.user_id, body)
    except DuplicateNoteIdError as exc:
        raise HTTPException(409, "Note id collision, retry the request") from exc


@router.get("", response_model=list[Note])
async def list_notes(
    principal: PrincipalDep,
    store: NoteStoreDep,
    scope: Literal["mine", "org"] = "mine",
    subject_id: Optional[str] = Query(default=None, min_length=1),
):
    user_id = principal.user_id if scope == "mine" else None
    return await store.list_notes(principal.org_id, user_id=user_id, subject_id=subject_id)


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: str, principal: PrincipalDep, store: NoteStoreDep):
    note = await store.get_note(principal.org_id, note_id)
    if not note:
        raise HTTPException(404, "Note not found")
    return note


@router.patch("/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    principal: PrincipalDep,
    store: NoteStoreDep,
):
    note = await store.update_note(principal.org_id, note_id, body)
    if not note:
        raise HTTPException(404, "Note not found")
    return note


@router.delete("/{note_id}")
async def delete_note(note_id: str, principal: PrincipalDep, store: NoteStoreDep):
    deleted = await store.delete_note(principal.org_id, note_id)
    if not deleted:
        raise HTTPException(404, "Note not found")
    logger.info(f"Deleted note {note_id[:8]} in org {principal.org_id}")
    return {"status": "deleted", "id": note_id}
