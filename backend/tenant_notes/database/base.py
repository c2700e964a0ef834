"""
Storage contract shared by every note store backend.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from tenant_notes.models import Note, NoteCreate, NoteUpdate, StoreBackend


def new_note_id() -> str:
    return str(uuid4())


class MonotonicClock:
    """UTC clock that never returns the same instant twice."""

    def __init__(self):
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current


class NoteStore(ABC):
    """
    Tenant-scoped note persistence.

    Every operation takes the org id explicitly. A note that exists under a
    different org is reported exactly like a missing one: ``None`` from reads
    and updates, ``False`` from deletes. List results are ordered newest first.
    """

    backend: StoreBackend

    @abstractmethod
    async def create_note(self, org_id: str, user_id: str, data: NoteCreate) -> Note:
        """
        Persist a new note with a generated id and timestamps.

        :raises DuplicateNoteIdError: If the generated id is already taken
        """

    @abstractmethod
    async def get_note(self, org_id: str, note_id: str) -> Note | None:
        ...

    @abstractmethod
    async def list_notes_by_user(self, org_id: str, user_id: str) -> list[Note]:
        ...

    @abstractmethod
    async def list_notes_by_org(self, org_id: str) -> list[Note]:
        ...

    @abstractmethod
    async def list_notes_by_subject(self, org_id: str, subject_id: str) -> list[Note]:
        ...

    @abstractmethod
    async def update_note(
        self, org_id: str, note_id: str, data: NoteUpdate
    ) -> Note | None:
        """Apply a partial update and refresh ``updated_at``."""

    @abstractmethod
    async def delete_note(self, org_id: str, note_id: str) -> bool:
        """Hard-delete a note. Returns False when nothing was removed."""

    async def list_notes(
        self,
        org_id: str,
        *,
        user_id: str | None = None,
        subject_id: str | None = None,
    ) -> list[Note]:
        """
        List notes through the most selective index for the given filters.

        A subject narrows further than a user, which narrows further than the
        whole org. Whichever filter the chosen index does not cover is applied
        to its results, which keeps the index order intact.

        :param org_id: Tenant to read from
        :type org_id: str
        :param user_id: Only notes created by this user
        :type user_id: str | None
        :param subject_id: Only notes about this subject
        :type subject_id: str | None
        :return: Matching notes, newest first
        :rtype: list[Note]
        """
        if subject_id is not None:
            notes = await self.list_notes_by_subject(org_id, subject_id)
            if user_id is not None:
                notes = [n for n in notes if n.user_id == user_id]
            return notes
        if user_id is not None:
            return await self.list_notes_by_user(org_id, user_id)
        return await self.list_notes_by_org(org_id)
