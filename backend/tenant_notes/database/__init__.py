"""
Tenant-scoped note storage.

Usage:
    from tenant_notes.database import NoteStoreProvider, NoteStore
    store = NoteStoreProvider(settings).get()
"""

from tenant_notes.database.base import NoteStore
from tenant_notes.database.dynamo import DynamoNoteStore
from tenant_notes.database.errors import (
    DuplicateNoteIdError,
    NoteStoreError,
    StoreConfigurationError,
    TransientStorageError,
)
from tenant_notes.database.factory import NoteStoreProvider, build_note_store
from tenant_notes.database.memory import InMemoryNoteStore

__all__ = [
    "NoteStore", "InMemoryNoteStore", "DynamoNoteStore",
    "NoteStoreProvider", "build_note_store",
    "NoteStoreError", "DuplicateNoteIdError", "StoreConfigurationError", "TransientStorageError",
]
