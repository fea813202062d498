"""DynamoDB-backed transcript store.

Each conversation is one item in the table::

    {"convId": "<conversation id>", "chat": [{"role": ..., "content": ...}, ...]}

A cleared conversation keeps its item with ``chat`` set to null, which
:meth:`TranscriptStore.fetch` reports the same as a missing item.

There is no locking and no conditional write: concurrent turns on the
same conversation race and the last :meth:`~TranscriptStore.replace`
wins.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from ttchat.exceptions import StoreUnavailable
from ttchat.models.message import (
    Message,
    transcript_from_records,
    transcript_to_records,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "ttchat"

_KEY_ATTR = "convId"
_CHAT_ATTR = "chat"


class TranscriptStore:
    """Read and write conversation transcripts keyed by conversation id.

    Args:
        table_name: Name of the DynamoDB table.
        region_name: AWS region, or ``None`` for the boto3 default chain.
        table: Optional pre-built DynamoDB ``Table`` resource.  If ``None``,
            one is built with :func:`boto3.resource`.  Pass a fake here in
            tests.
    """

    def __init__(
        self,
        table_name: str = DEFAULT_TABLE,
        region_name: str | None = None,
        table: Any | None = None,
    ) -> None:
        if table is None:
            table = boto3.resource("dynamodb", region_name=region_name).Table(table_name)
        self._table = table
        self._table_name = table_name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, conversation_id: str) -> list[Message] | None:
        """Return the stored transcript, or ``None`` if there is none.

        Raises:
            StoreUnavailable: If the table cannot be read, or the stored
                ``chat`` attribute is not a list of messages.
        """
        try:
            response = self._table.get_item(Key={_KEY_ATTR: conversation_id})
        except (BotoCoreError, ClientError) as exc:
            raise self._unavailable("fetch", conversation_id, exc) from exc

        records = (response.get("Item") or {}).get(_CHAT_ATTR)
        if records is None:
            logger.debug("No transcript stored for conversation %s", conversation_id)
            return None

        if not isinstance(records, list):
            raise StoreUnavailable(
                f"Stored transcript for {conversation_id!r} is not a list",
                operation="fetch",
                conversation_id=conversation_id,
            )
        try:
            transcript = transcript_from_records(records)
        except ValidationError as exc:
            raise StoreUnavailable(
                f"Stored transcript for {conversation_id!r} is invalid: {exc}",
                operation="fetch",
                conversation_id=conversation_id,
            ) from exc

        logger.debug(
            "Fetched %d message(s) for conversation %s",
            len(transcript),
            conversation_id,
        )
        return transcript

    def create(self, conversation_id: str, transcript: list[Message]) -> None:
        """Store a new transcript record, overwriting any existing one.

        Raises:
            StoreUnavailable: If the table cannot be written.
        """
        item = {
            _KEY_ATTR: conversation_id,
            _CHAT_ATTR: transcript_to_records(transcript),
        }
        try:
            self._table.put_item(Item=item)
        except (BotoCoreError, ClientError) as exc:
            raise self._unavailable("create", conversation_id, exc) from exc
        logger.info("Created transcript for conversation %s", conversation_id)

    def replace(self, conversation_id: str, transcript: list[Message] | None) -> None:
        """Unconditionally overwrite the transcript; ``None`` clears it.

        Raises:
            StoreUnavailable: If the table cannot be written.
        """
        value = None if transcript is None else transcript_to_records(transcript)
        try:
            self._table.update_item(
                Key={_KEY_ATTR: conversation_id},
                UpdateExpression=f"set {_CHAT_ATTR} = :chat",
                ExpressionAttributeValues={":chat": value},
                ReturnValues="NONE",
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._unavailable("replace", conversation_id, exc) from exc

        if transcript is None:
            logger.info("Cleared transcript for conversation %s", conversation_id)
        else:
            logger.debug(
                "Stored %d message(s) for conversation %s",
                len(transcript),
                conversation_id,
            )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _unavailable(
        self,
        operation: str,
        conversation_id: str,
        exc: Exception,
    ) -> StoreUnavailable:
        logger.error(
            "Store %s failed for conversation %s (table=%s): %s",
            operation,
            conversation_id,
            self._table_name,
            exc,
        )
        return StoreUnavailable(
            f"Transcript store {operation} failed: {exc}",
            operation=operation,
            conversation_id=conversation_id,
        )
