"""Conversation session manager.

Realises one chat turn as a read-modify-write against the transcript
store:

1. fetch the transcript (create it with the system message if absent),
2. append the user message,
3. ask Gemini for a reply with the whole transcript as context,
4. append the reply when there is one,
5. write the transcript back, even if no reply was obtained.

Store failures propagate as :class:`~ttchat.exceptions.StoreUnavailable`.
Completion failures are absorbed and reported to the caller as
:data:`FAILED_REPLY`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ttchat.exceptions import CompletionFailure
from ttchat.llm import GeminiClient
from ttchat.models.message import Message
from ttchat.prompts import build_system_message
from ttchat.store import TranscriptStore

logger = logging.getLogger(__name__)

FAILED_REPLY = "something went wrong"


@dataclass(frozen=True)
class ChatReply:
    """Result of one chat turn.

    Attributes:
        prompt: The user text exactly as received.
        reply: The assistant reply, or :data:`FAILED_REPLY`.
        completed: ``True`` when the reply came from the model.
    """

    prompt: str
    reply: str
    completed: bool


class ConversationSession:
    """Runs chat turns and resets against injected collaborators.

    Args:
        store: Transcript persistence.
        llm: Completion client used to produce assistant replies.
    """

    def __init__(self, store: TranscriptStore, llm: GeminiClient) -> None:
        self._store = store
        self._llm = llm

    def chat(self, conversation_id: str, text: str) -> ChatReply:
        """Append *text* to the conversation and return the assistant reply.

        Args:
            conversation_id: Caller-supplied conversation key.
            text: The user's utterance.

        Returns:
            A :class:`ChatReply`.  ``completed`` is ``False`` and ``reply`` is
            :data:`FAILED_REPLY` when the model produced no usable text.

        Raises:
            StoreUnavailable: If the transcript cannot be read or written.
        """
        transcript = self._store.fetch(conversation_id)
        if transcript is None:
            transcript = [build_system_message()]
            self._store.create(conversation_id, transcript)
            logger.info("Started new conversation %s", conversation_id)
        else:
            transcript = list(transcript)

        transcript.append(Message(role="user", content=text))

        reply: str | None
        try:
            reply = self._llm.complete(transcript)
        except CompletionFailure as exc:
            logger.warning("No reply for conversation %s: %s", conversation_id, exc)
            reply = None

        if reply:
            transcript.append(Message(role="assistant", content=reply))

        self._store.replace(conversation_id, transcript)
        logger.info(
            "Chat turn for %s completed=%s (%d messages)",
            conversation_id,
            bool(reply),
            len(transcript),
        )

        if not reply:
            return ChatReply(prompt=text, reply=FAILED_REPLY, completed=False)
        return ChatReply(prompt=text, reply=reply, completed=True)

    def clear(self, conversation_id: str) -> str:
        """Discard the whole transcript of *conversation_id* and return the id.

        Raises:
            StoreUnavailable: If the store cannot be written.
        """
        self._store.replace(conversation_id, None)
        return conversation_id
