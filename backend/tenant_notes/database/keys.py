"""
Key derivation for note records and their secondary indexes.

Every key embeds the org id as its first identifier component. Components are
percent-escaped, so the ``:`` separator never appears inside one and two
distinct (org, id) inputs can never produce the same key.
"""

from datetime import datetime, timezone
from urllib.parse import quote

SEPARATOR = ":"

NOTE_PREFIX = "note"
USER_NOTES_PREFIX = "user_notes"
ORG_NOTES_PREFIX = "org_notes"
SUBJECT_NOTES_PREFIX = "subject_notes"


def _component(value: str, label: str) -> str:
    if not value:
        raise ValueError(f"{label} must be a non-empty string")
    return quote(value, safe="")


def _join(prefix: str, *components: str) -> str:
    return SEPARATOR.join((prefix, *components))


def primary_key(org_id: str, note_id: str) -> str:
    """
    Build the primary key of a note.

    :param org_id: Owning tenant
    :type org_id: str
    :param note_id: Note identifier
    :type note_id: str
    :return: ``note:{org}:{id}``
    :rtype: str
    """
    return _join(NOTE_PREFIX, _component(org_id, "org_id"), _component(note_id, "note_id"))


def user_index_key(org_id: str, user_id: str) -> str:
    """Partition key grouping one user's notes inside a tenant."""
    return _join(USER_NOTES_PREFIX, _component(org_id, "org_id"), _component(user_id, "user_id"))


def org_index_key(org_id: str) -> str:
    """Partition key grouping every note of a tenant."""
    return _join(ORG_NOTES_PREFIX, _component(org_id, "org_id"))


def subject_index_key(org_id: str, subject_id: str) -> str:
    """Partition key grouping a tenant's notes about one subject."""
    return _join(
        SUBJECT_NOTES_PREFIX,
        _component(org_id, "org_id"),
        _component(subject_id, "subject_id"),
    )


def format_timestamp(value: datetime) -> str:
    """
    Render a timestamp as fixed-width UTC ISO-8601.

    Microseconds are always present so that string order equals time order,
    e.g. ``2024-05-01T09:30:00.000000+00:00``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def index_sort_key(created_at: datetime, note_id: str) -> str:
    """
    Sort key shared by every secondary index entry.

    The creation timestamp leads so a descending scan yields newest first; the
    note id follows so equal timestamps still give unique, stable keys.
    """
    return _join(format_timestamp(created_at), _component(note_id, "note_id"))
