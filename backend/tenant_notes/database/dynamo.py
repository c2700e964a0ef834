"""
DynamoDB single-table note store.

One item per note, hash key ``pk``. Index keys live on the item itself as plain
attributes, so one conditional write keeps the record and every index
projection in step:

    pk                note:{org}:{id}
    user_index_pk     user_notes:{org}:{user}       -> GSI by-user
    org_index_pk      org_notes:{org}               -> GSI by-org
    subject_index_pk  subject_notes:{org}:{subject} -> GSI by-subject (only when set)
    index_sk          {created_at}:{id}             sort key of all three GSIs
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config
from botocore.exceptions import ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from tenant_notes.database.base import MonotonicClock, NoteStore, new_note_id
from tenant_notes.database.errors import DuplicateNoteIdError, TransientStorageError
from tenant_notes.database.keys import (
    format_timestamp,
    index_sort_key,
    org_index_key,
    parse_timestamp,
    primary_key,
    subject_index_key,
    user_index_key,
)
from tenant_notes.logging import get_logger
from tenant_notes.models import Note, NoteCreate, NoteUpdate, StoreBackend

logger = get_logger('database.dynamo')

USER_INDEX = "by-user"
ORG_INDEX = "by-org"
SUBJECT_INDEX = "by-subject"

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

_TRANSIENT_ERROR_CODES = frozenset({
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
})

_OWNED_BY_ORG = "attribute_exists(#pk) AND #org_id = :org_id"
_OWNED_AND_NOT_BEFORE_CREATION = _OWNED_BY_ORG + " AND #created_at <= :updated_at"

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _serialize(attributes: dict[str, Any]) -> dict[str, dict]:
    return {name: _serializer.serialize(value) for name, value in attributes.items()}


def _item_to_note(item: dict[str, dict]) -> Note:
    row = {name: _deserializer.deserialize(value) for name, value in item.items()}
    return Note(
        id=row["id"],
        org_id=row["org_id"],
        user_id=row["user_id"],
        subject_id=row.get("subject_id"),
        title=row["title"],
        content=row["content"],
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def _note_to_item(note: Note) -> dict[str, dict]:
    attributes = {
        "pk": primary_key(note.org_id, note.id),
        "id": note.id,
        "org_id": note.org_id,
        "user_id": note.user_id,
        "title": note.title,
        "content": note.content,
        "created_at": format_timestamp(note.created_at),
        "updated_at": format_timestamp(note.updated_at),
        "user_index_pk": user_index_key(note.org_id, note.user_id),
        "org_index_pk": org_index_key(note.org_id),
        "index_sk": index_sort_key(note.created_at, note.id),
    }
    if note.subject_id is not None:
        attributes["subject_id"] = note.subject_id
        attributes["subject_index_pk"] = subject_index_key(note.org_id, note.subject_id)
    return _serialize(attributes)


def create_dynamodb_client(
    region: str,
    endpoint_url: Optional[str] = None,
    connect_timeout: float = 2.0,
    read_timeout: float = 5.0,
    max_attempts: int = 1,
):
    """
    Build a low-level DynamoDB client with bounded timeouts.

    ``max_attempts`` is the total number of tries including the first, so the
    default of 1 disables client retries and leaves retry policy to the caller.
    """
    config = Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"total_max_attempts": max_attempts, "mode": "standard"},
    )
    return boto3.client(
        "dynamodb",
        region_name=region,
        endpoint_url=endpoint_url,
        config=config,
    )


class DynamoNoteStore(NoteStore):
    """Note store backed by a single DynamoDB table and three GSIs."""

    backend = StoreBackend.DYNAMODB

    def __init__(
        self,
        client,
        table_name: str,
        id_factory: Callable[[], str] = new_note_id,
    ):
        self.client = client
        self.table_name = table_name
        self._clock = MonotonicClock()
        self._new_id = id_factory
        logger.info(f"DynamoDB note store using table {table_name}")

    async def _call(self, operation_name: str, **kwargs) -> dict:
        method = getattr(self.client, operation_name)
        try:
            return await asyncio.to_thread(method, TableName=self.table_name, **kwargs)
        except ClientError as error:
            code = _error_code(error)
            if code in _TRANSIENT_ERROR_CODES:
                logger.warning(f"DynamoDB {operation_name} rejected with {code}")
                raise TransientStorageError(
                    f"DynamoDB {operation_name} failed: {code}"
                ) from error
            raise
        except (BotoConnectionError, HTTPClientError) as error:
            logger.warning(f"DynamoDB {operation_name} could not reach the service: {error}")
            raise TransientStorageError(f"DynamoDB {operation_name} failed: {error}") from error

    async def _query_index(self, index_name: str, key_attribute: str, key_value: str) -> list[Note]:
        request: dict[str, Any] = {
            "IndexName": index_name,
            "KeyConditionExpression": "#key = :key",
            "ExpressionAttributeNames": {"#key": key_attribute},
            "ExpressionAttributeValues": {":key": {"S": key_value}},
            "ScanIndexForward": False,
        }
        notes: list[Note] = []
        while True:
            response = await self._call("query", **request)
            notes.extend(_item_to_note(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return notes
            request["ExclusiveStartKey"] = last_key

    async def create_note(self, org_id: str, user_id: str, data: NoteCreate) -> Note:
        now = self._clock.now()
        note = Note(
            id=self._new_id(),
            org_id=org_id,
            user_id=user_id,
            subject_id=data.subject_id,
            title=data.title,
            content=data.content,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._call(
                "put_item",
                Item=_note_to_item(note),
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": "pk"},
            )
        except ClientError as error:
            if _error_code(error) == CONDITIONAL_CHECK_FAILED:
                logger.error(f"Generated note id {note.id} collided with an existing record")
                raise DuplicateNoteIdError(note.id) from error
            raise
        return note

    async def get_note(self, org_id: str, note_id: str) -> Note | None:
        response = await self._call(
            "get_item",
            Key={"pk": {"S": primary_key(org_id, note_id)}},
            ConsistentRead=True,
        )
        item = response.get("Item")
        if not item:
            return None
        note = _item_to_note(item)
        return note if note.org_id == org_id else None

    async def list_notes_by_user(self, org_id: str, user_id: str) -> list[Note]:
        return await self._query_index(USER_INDEX, "user_index_pk", user_index_key(org_id, user_id))

    async def list_notes_by_org(self, org_id: str) -> list[Note]:
        return await self._query_index(ORG_INDEX, "org_index_pk", org_index_key(org_id))

    async def list_notes_by_subject(self, org_id: str, subject_id: str) -> list[Note]:
        return await self._query_index(
            SUBJECT_INDEX, "subject_index_pk", subject_index_key(org_id, subject_id)
        )

    async def _conditional_update(
        self,
        org_id: str,
        note_id: str,
        data: NoteUpdate,
        updated_at: datetime,
    ) -> Note | None:
        names = {
            "#pk": "pk",
            "#org_id": "org_id",
            "#created_at": "created_at",
            "#updated_at": "updated_at",
        }
        values: dict[str, Any] = {
            ":org_id": org_id,
            ":updated_at": format_timestamp(updated_at),
        }
        assignments = ["#updated_at = :updated_at"]
        removals: list[str] = []

        if data.title is not None:
            names["#title"] = "title"
            values[":title"] = data.title
            assignments.append("#title = :title")
        if data.content is not None:
            names["#content"] = "content"
            values[":content"] = data.content
            assignments.append("#content = :content")
        if data.sets_subject or data.clears_subject:
            names["#subject_id"] = "subject_id"
            names["#subject_index_pk"] = "subject_index_pk"
            if data.sets_subject:
                values[":subject_id"] = data.subject_id
                values[":subject_index_pk"] = subject_index_key(org_id, data.subject_id)
                assignments.append("#subject_id = :subject_id")
                assignments.append("#subject_index_pk = :subject_index_pk")
            else:
                # Removing the key attribute drops the item from the by-subject GSI.
                removals.extend(["#subject_id", "#subject_index_pk"])

        expression = "SET " + ", ".join(assignments)
        if removals:
            expression += " REMOVE " + ", ".join(removals)

        try:
            response = await self._call(
                "update_item",
                Key={"pk": {"S": primary_key(org_id, note_id)}},
                UpdateExpression=expression,
                ConditionExpression=_OWNED_AND_NOT_BEFORE_CREATION,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=_serialize(values),
                ReturnValues="ALL_NEW",
            )
        except ClientError as error:
            if _error_code(error) == CONDITIONAL_CHECK_FAILED:
                return None
            raise
        return _item_to_note(response["Attributes"])

    async def update_note(
        self, org_id: str, note_id: str, data: NoteUpdate
    ) -> Note | None:
        """
        Apply a partial update in one conditional write.

        The write also requires ``created_at <= updated_at``. When it fails, a
        consistent read tells a missing or foreign note (``None``) apart from one
        whose ``created_at`` came from a writer with a clock running ahead of
        ours; the latter is written once more, stamped just after creation.
        """
        updated = await self._conditional_update(org_id, note_id, data, self._clock.now())
        if updated is not None:
            return updated

        current = await self.get_note(org_id, note_id)
        if current is None:
            return None
        updated_at = max(self._clock.now(), current.created_at + timedelta(microseconds=1))
        logger.warning(
            f"Note {note_id[:8]} was created ahead of the local clock, stamping update at "
            f"{format_timestamp(updated_at)}"
        )
        return await self._conditional_update(org_id, note_id, data, updated_at)

    async def delete_note(self, org_id: str, note_id: str) -> bool:
        try:
            await self._call(
                "delete_item",
                Key={"pk": {"S": primary_key(org_id, note_id)}},
                ConditionExpression=_OWNED_BY_ORG,
                ExpressionAttributeNames={"#pk": "pk", "#org_id": "org_id"},
                ExpressionAttributeValues={":org_id": {"S": org_id}},
            )
        except ClientError as error:
            if _error_code(error) == CONDITIONAL_CHECK_FAILED:
                return False
            raise
        return True
