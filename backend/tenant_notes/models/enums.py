"""
Enum definitions for the notes API.
"""
from enum import Enum
from typing import Optional


class StoreBackend(str, Enum):
    """Which storage engine backs the note store."""
    INMEMORY = "inmemory"
    DYNAMODB = "dynamodb"


class OrgRole(str, Enum):
    """Role a principal holds inside its organization."""
    OWNER = "owner"
    ADMIN = "admin"
    PROVIDER = "provider"
    SCRIBE = "scribe"


_BACKEND_ALIASES = {
    "inmemory": StoreBackend.INMEMORY,
    "in-memory": StoreBackend.INMEMORY,
    "memory": StoreBackend.INMEMORY,
    "dynamo": StoreBackend.DYNAMODB,
    "dynamodb": StoreBackend.DYNAMODB,
}


def parse_store_backend(value: str) -> Optional[StoreBackend]:
    """
    Resolve a configured backend name, tolerating case and common aliases.

    Examples:
        "InMemory" -> StoreBackend.INMEMORY
        " dynamo " -> StoreBackend.DYNAMODB
        "redis"    -> None
    """
    return _BACKEND_ALIASES.get(value.lower().strip())
