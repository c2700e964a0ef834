"""Note domain model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Payload for creating a note."""
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    subject_id: Optional[str] = Field(default=None, min_length=1)


class NoteUpdate(BaseModel):
    """
    Payload for a partial note update.

    Omitted fields are left untouched. ``subject_id`` is the only field where an
    explicit ``null`` means something: it detaches the note from its subject.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    subject_id: Optional[str] = Field(default=None, min_length=1)

    @property
    def clears_subject(self) -> bool:
        return "subject_id" in self.model_fields_set and self.subject_id is None

    @property
    def sets_subject(self) -> bool:
        return self.subject_id is not None


class Note(BaseModel):
    """A tenant-scoped note, optionally attached to a subject (case, patient, ticket)."""
    id: str
    org_id: str
    user_id: str
    subject_id: Optional[str] = None
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
