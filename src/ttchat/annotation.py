"""Sentence annotation service.

Asks Gemini to decompose a Japanese sentence into its kana reading,
romaji and English translation.  Parsing is tolerant (code fences and
surrounding prose are ignored) but the result is all-or-nothing: a reply
that does not yield all three fields is reported as an unparsed
:class:`~ttchat.models.annotation.AnnotationResult`, never as an error.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from ttchat.exceptions import CompletionFailure, MalformedAnnotation
from ttchat.llm import GeminiClient
from ttchat.models.annotation import Annotation, AnnotationResult
from ttchat.prompts import build_annotation_messages

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class SentenceAnnotator:
    """Stateless annotation of single sentences.

    Args:
        llm: Completion client used for the annotation request.
    """

    def __init__(self, llm: GeminiClient) -> None:
        self._llm = llm

    def annotate(self, sentence: str) -> AnnotationResult:
        """Return reading aids for *sentence*.

        Args:
            sentence: The Japanese sentence to explain.

        Returns:
            A parsed :class:`AnnotationResult`, or an unparsed one when the
            model failed or its reply could not be parsed.
        """
        messages = build_annotation_messages(sentence)
        try:
            raw_text = self._llm.complete(messages, response_schema=Annotation)
        except CompletionFailure as exc:
            logger.warning("Annotation request failed: %s", exc)
            return AnnotationResult.unparsed(str(exc))

        try:
            annotation = parse_annotation(raw_text)
        except MalformedAnnotation as exc:
            logger.error(
                "Could not parse annotation reply: %s | Raw response: %s",
                exc,
                exc.raw_response,
            )
            return AnnotationResult.unparsed(str(exc), raw_response=raw_text)

        return AnnotationResult.parsed(annotation, raw_response=raw_text)


def parse_annotation(raw_text: str) -> Annotation:
    """Parse a model reply into an :class:`Annotation`.

    Accepts a bare JSON object, one wrapped in a Markdown code fence, or
    one embedded in surrounding prose.

    Raises:
        MalformedAnnotation: If no JSON object can be decoded, or it lacks
            any of the three fields.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedAnnotation("Empty response from LLM", raw_response=raw_text or "")

    data = _decode_object(raw_text)
    try:
        return Annotation.model_validate(data)
    except ValidationError as exc:
        raise MalformedAnnotation(
            f"Schema validation failed: {exc}", raw_response=raw_text
        ) from exc


def _strip_code_fences(text: str) -> str:
    t = text.strip()
    if t.startswith("```") and t.endswith("```"):
        t = re.sub(r"^```[A-Za-z0-9_-]*\s*", "", t)
        t = re.sub(r"\s*```$", "", t)
    return t.strip()


def _decode_object(raw_text: str) -> dict[str, Any]:
    text = _strip_code_fences(raw_text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        match = _JSON_OBJECT.search(text)
        if match is None:
            raise MalformedAnnotation(f"Invalid JSON: {exc}", raw_response=raw_text) from exc
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as inner:
            raise MalformedAnnotation(
                f"Invalid JSON: {inner}", raw_response=raw_text
            ) from inner

    if not isinstance(data, dict):
        raise MalformedAnnotation(
            f"Expected a JSON object, got {type(data).__name__}", raw_response=raw_text
        )
    return data
