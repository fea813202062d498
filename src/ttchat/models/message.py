"""Chat message model and transcript (de)serialisation helpers.

A transcript is a plain ``list[Message]``.  In the store it is held as a
list of ``{"role": ..., "content": ...}`` maps so that records stay
readable from the DynamoDB console and from other clients.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single turn in a conversation transcript.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: The message text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


def transcript_to_records(transcript: list[Message]) -> list[dict[str, str]]:
    """Convert a transcript into the list-of-maps form kept in the store."""
    return [message.model_dump() for message in transcript]


def transcript_from_records(records: list[Any]) -> list[Message]:
    """Rebuild a transcript from stored records.

    Raises:
        pydantic.ValidationError: If any record is not a valid message.
    """
    return [Message.model_validate(record) for record in records]
