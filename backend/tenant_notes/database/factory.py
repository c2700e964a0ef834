"""
Note store construction from configuration.
"""

from tenant_notes.config import Settings
from tenant_notes.database.base import NoteStore
from tenant_notes.database.dynamo import DynamoNoteStore, create_dynamodb_client
from tenant_notes.database.errors import StoreConfigurationError
from tenant_notes.database.memory import InMemoryNoteStore
from tenant_notes.logging import get_logger
from tenant_notes.models import StoreBackend, parse_store_backend

logger = get_logger('database.factory')


def _build_dynamo_store(settings: Settings) -> DynamoNoteStore:
    missing = [
        name
        for name, value in (
            ("DYNAMODB_TABLE_NAME", settings.DYNAMODB_TABLE_NAME),
            ("AWS_REGION", settings.AWS_REGION),
        )
        if not value
    ]
    if missing:
        logger.error(f"DynamoDB note store is missing configuration: {', '.join(missing)}")
        raise StoreConfigurationError(
            f"DynamoDB note store requires {', '.join(missing)}"
        )

    client = create_dynamodb_client(
        region=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
        connect_timeout=settings.DYNAMODB_CONNECT_TIMEOUT_SECONDS,
        read_timeout=settings.DYNAMODB_READ_TIMEOUT_SECONDS,
        max_attempts=settings.DYNAMODB_MAX_ATTEMPTS,
    )
    return DynamoNoteStore(client=client, table_name=settings.DYNAMODB_TABLE_NAME)


def build_note_store(settings: Settings) -> NoteStore:
    """
    Construct the note store selected by ``NOTES_STORE``.

    An unrecognised value falls back to the in-memory store with a warning
    rather than failing startup.

    :param settings: Application settings
    :type settings: Settings
    :return: A fresh store instance
    :rtype: NoteStore
    :raises StoreConfigurationError: If DynamoDB is selected without a table name or region
    """
    backend = parse_store_backend(settings.NOTES_STORE)
    if backend is None:
        logger.warning(
            f"Unknown NOTES_STORE '{settings.NOTES_STORE}', falling back to {StoreBackend.INMEMORY.value}"
        )
        backend = StoreBackend.INMEMORY

    logger.info(f"Creating note store: {backend.value}")
    if backend is StoreBackend.DYNAMODB:
        return _build_dynamo_store(settings)
    return InMemoryNoteStore()


class NoteStoreProvider:
    """Builds the configured store on first use and hands out that one instance."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._store: NoteStore | None = None

    def get(self) -> NoteStore:
        if self._store is None:
            self._store = build_note_store(self.settings)
        return self._store

    def reset(self) -> None:
        """Drop the current store so the next ``get()`` constructs a new one."""
        self._store = None
