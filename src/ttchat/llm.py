"""Gemini completion client.

Wraps the Google ``google-genai`` SDK behind a single :meth:`complete`
call that takes a transcript and returns one trimmed reply.  Every
failure to obtain usable text is raised as
:class:`~ttchat.exceptions.CompletionFailure`; callers decide how to
degrade.  No retries are attempted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ttchat.exceptions import CompletionFailure
from ttchat.models.message import Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"

# Gemini calls the assistant side of a conversation "model".
_GEMINI_ROLES = {"user": "user", "assistant": "model"}


@dataclass(frozen=True)
class SamplingConfig:
    """Sampling parameters applied to every completion request."""

    temperature: float = 1.0
    max_output_tokens: int = 256
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


DEFAULT_SAMPLING = SamplingConfig()


class GeminiClient:
    """Completion client backed by Google Gemini.

    Args:
        api_key: Google Gemini API key.
        model: Model identifier to use for generation.
        sampling: Sampling parameters for every request.
        client: Optional pre-built ``genai.Client``.  If ``None``, one is
            built from *api_key*.  Pass a mock here in tests.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        sampling: SamplingConfig = DEFAULT_SAMPLING,
        client: Any | None = None,
    ) -> None:
        self._client = client or genai.Client(api_key=api_key)
        self._model = model
        self._sampling = sampling

    @property
    def model(self) -> str:
        return self._model

    def complete(
        self,
        messages: list[Message],
        response_schema: type | None = None,
    ) -> str:
        """Return the model's reply to *messages*.

        System messages are joined into Gemini's ``system_instruction``;
        user and assistant messages become the conversation contents in
        order.  Messages with blank content are left out, since Gemini
        rejects empty text parts.

        Args:
            messages: The full prompt context, oldest first.
            response_schema: Optional Pydantic model.  When given, Gemini is
                asked for JSON output conforming to it.

        Returns:
            The reply text, stripped of surrounding whitespace.  Never empty.

        Raises:
            CompletionFailure: On API errors, transport errors, when there is
                no non-blank user or assistant message to send, or when the
                reply contains no text.
        """
        system_instruction, contents = _to_gemini_contents(messages)
        if not contents:
            raise CompletionFailure("No non-empty messages to send to Gemini")
        config = self._build_config(system_instruction, response_schema)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Messages sent to Gemini: %s",
                json.dumps([m.model_dump() for m in messages], ensure_ascii=False),
            )

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            logger.error("Gemini API error: %s", exc)
            raise CompletionFailure(f"Gemini API call failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini transport error: %s", exc)
            raise CompletionFailure(f"Gemini transport error: {exc}") from exc

        text = (response.text or "").strip()
        if not text:
            raise CompletionFailure("Gemini returned an empty reply")

        logger.debug("Raw Gemini reply: %s", text)
        return text

    def _build_config(
        self,
        system_instruction: str | None,
        response_schema: type | None,
    ) -> genai_types.GenerateContentConfig:
        kwargs: dict[str, Any] = {
            "temperature": self._sampling.temperature,
            "max_output_tokens": self._sampling.max_output_tokens,
            "top_p": self._sampling.top_p,
        }
        # Zero penalties are Gemini's default; some models reject the fields.
        if self._sampling.frequency_penalty:
            kwargs["frequency_penalty"] = self._sampling.frequency_penalty
        if self._sampling.presence_penalty:
            kwargs["presence_penalty"] = self._sampling.presence_penalty
        if system_instruction:
            kwargs["system_instruction"] = system_instruction
        if response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = response_schema
        return genai_types.GenerateContentConfig(**kwargs)


def _to_gemini_contents(
    messages: list[Message],
) -> tuple[str | None, list[genai_types.Content]]:
    """Split *messages* into a system instruction and Gemini ``Content`` turns."""
    system_parts: list[str] = []
    contents: list[genai_types.Content] = []
    for message in messages:
        if message.role == "system":
            system_parts.append(message.content)
            continue
        if not message.content.strip():
            continue
        contents.append(
            genai_types.Content(
                role=_GEMINI_ROLES[message.role],
                parts=[genai_types.Part(text=message.content)],
            )
        )
    system_instruction = "\n\n".join(system_parts) if system_parts else None
    return system_instruction, contents
