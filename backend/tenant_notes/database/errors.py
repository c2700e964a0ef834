"""
Storage error taxonomy.

"Not found" is deliberately absent: lookups return ``None`` and deletes return
``False``, and a record owned by another tenant is indistinguishable from one
that does not exist.
"""


class NoteStoreError(Exception):
    """Base class for note store failures."""


class DuplicateNoteIdError(NoteStoreError):
    """A freshly generated note id collided with an existing record."""

    def __init__(self, note_id: str):
        super().__init__(f"Note id {note_id} already exists")
        self.note_id = note_id


class StoreConfigurationError(NoteStoreError):
    """Required backend configuration is missing; raised once at construction."""


class TransientStorageError(NoteStoreError):
    """The storage engine was unreachable, throttled or timed out. Safe to retry."""
