"""
Notes API models.

Usage:
    from tenant_notes.models import Note, NoteCreate, NoteUpdate, Principal
    from tenant_notes.models import StoreBackend, OrgRole, parse_store_backend
"""

# --- Enums & utilities ---
from tenant_notes.models.enums import (
    StoreBackend,
    OrgRole,
    parse_store_backend,
)

# --- Domain models ---
from tenant_notes.models.domain import (
    Note, NoteCreate, NoteUpdate,
    Principal,
)

__all__ = [
    # Enums
    "StoreBackend", "OrgRole", "parse_store_backend",
    # Domain
    "Note", "NoteCreate", "NoteUpdate",
    "Principal",
]
