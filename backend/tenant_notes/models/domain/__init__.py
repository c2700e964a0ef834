"""Domain models: the data structures the note store persists and serves."""

from tenant_notes.models.domain.note import Note, NoteCreate, NoteUpdate
from tenant_notes.models.domain.principal import Principal

__all__ = [
    "Note", "NoteCreate", "NoteUpdate",
    "Principal",
]
