"""
In-memory note store for development and tests.
"""

from collections.abc import Callable
from itertools import count

from tenant_notes.database.base import MonotonicClock, NoteStore, new_note_id
from tenant_notes.database.errors import DuplicateNoteIdError
from tenant_notes.database.keys import primary_key
from tenant_notes.logging import get_logger
from tenant_notes.models import Note, NoteCreate, NoteUpdate, StoreBackend

logger = get_logger('database.memory')


class InMemoryNoteStore(NoteStore):
    """
    Dict-backed store keyed by primary key.

    Lists are a full scan plus sort; there are no secondary indexes to keep in
    step. Callers only ever receive copies of the stored notes.
    """

    backend = StoreBackend.INMEMORY

    def __init__(self, id_factory: Callable[[], str] = new_note_id):
        self._notes: dict[str, tuple[int, Note]] = {}
        self._sequence = count()
        self._clock = MonotonicClock()
        self._new_id = id_factory

    def _scan(self, predicate: Callable[[Note], bool]) -> list[Note]:
        matches = [entry for entry in self._notes.values() if predicate(entry[1])]
        matches.sort(key=lambda entry: (entry[1].created_at, entry[0]), reverse=True)
        return [note.model_copy() for _, note in matches]

    async def create_note(self, org_id: str, user_id: str, data: NoteCreate) -> Note:
        note_id = self._new_id()
        key = primary_key(org_id, note_id)
        if key in self._notes:
            raise DuplicateNoteIdError(note_id)

        now = self._clock.now()
        note = Note(
            id=note_id,
            org_id=org_id,
            user_id=user_id,
            subject_id=data.subject_id,
            title=data.title,
            content=data.content,
            created_at=now,
            updated_at=now,
        )
        self._notes[key] = (next(self._sequence), note)
        logger.debug(f"Created note {note_id[:8]} in org {org_id}")
        return note.model_copy()

    async def get_note(self, org_id: str, note_id: str) -> Note | None:
        entry = self._notes.get(primary_key(org_id, note_id))
        if entry is None or entry[1].org_id != org_id:
            return None
        return entry[1].model_copy()

    async def list_notes_by_user(self, org_id: str, user_id: str) -> list[Note]:
        return self._scan(lambda n: n.org_id == org_id and n.user_id == user_id)

    async def list_notes_by_org(self, org_id: str) -> list[Note]:
        return self._scan(lambda n: n.org_id == org_id)

    async def list_notes_by_subject(self, org_id: str, subject_id: str) -> list[Note]:
        return self._scan(lambda n: n.org_id == org_id and n.subject_id == subject_id)

    async def update_note(
        self, org_id: str, note_id: str, data: NoteUpdate
    ) -> Note | None:
        key = primary_key(org_id, note_id)
        entry = self._notes.get(key)
        if entry is None or entry[1].org_id != org_id:
            return None

        sequence, existing = entry
        fields: dict = {"updated_at": self._clock.now()}
        if data.title is not None:
            fields["title"] = data.title
        if data.content is not None:
            fields["content"] = data.content
        if data.sets_subject or data.clears_subject:
            fields["subject_id"] = data.subject_id

        updated = existing.model_copy(update=fields)
        self._notes[key] = (sequence, updated)
        return updated.model_copy()

    async def delete_note(self, org_id: str, note_id: str) -> bool:
        key = primary_key(org_id, note_id)
        entry = self._notes.get(key)
        if entry is None or entry[1].org_id != org_id:
            return False
        del self._notes[key]
        return True
