"""Unit tests for SentenceAnnotator and parse_annotation.

The annotator must never raise for model-side problems: unparseable
replies and failed completions both yield an unparsed result.
"""

from __future__ import annotations

import json

import pytest

from ttchat.annotation import SentenceAnnotator, parse_annotation
from ttchat.exceptions import CompletionFailure, MalformedAnnotation
from ttchat.models.annotation import Annotation
from ttchat.prompts import ANNOTATION_SYSTEM_PROMPT

_GOOD = {
    "reading": "たべます",
    "romaji": "tabemasu",
    "translation": "I will eat.",
}


# ---------------------------------------------------------------------------
# parse_annotation
# ---------------------------------------------------------------------------


class TestParseAnnotation:
    """Tolerant JSON extraction with strict field validation."""

    def test_plain_json(self) -> None:
        """A bare JSON object parses."""
        assert parse_annotation(json.dumps(_GOOD, ensure_ascii=False)) == Annotation(**_GOOD)

    def test_code_fenced_json(self) -> None:
        """A ```json fenced block parses."""
        raw = "```json\n" + json.dumps(_GOOD, ensure_ascii=False) + "\n```"

        assert parse_annotation(raw) == Annotation(**_GOOD)

    def test_json_embedded_in_prose(self) -> None:
        """Leading and trailing prose is ignored."""
        raw = "Here you go: " + json.dumps(_GOOD, ensure_ascii=False) + " Hope it helps!"

        assert parse_annotation(raw).romaji == "tabemasu"

    def test_extra_keys_are_ignored(self) -> None:
        """Unknown keys do not invalidate the record."""
        raw = json.dumps({**_GOOD, "notes": "polite form"})

        assert parse_annotation(raw).translation == "I will eat."

    @pytest.mark.parametrize(
        ("raw", "match"),
        [
            ("", "Empty response"),
            ("たべます means to eat", "Invalid JSON"),
            ("{reading: たべます}", "Invalid JSON"),
            ('["たべます", "tabemasu"]', "Expected a JSON object"),
            ('{"reading": "たべます", "romaji": "tabemasu"}', "Schema validation failed"),
        ],
    )
    def test_malformed_replies_raise(self, raw: str, match: str) -> None:
        """Anything that is not a complete object raises MalformedAnnotation."""
        with pytest.raises(MalformedAnnotation, match=match) as exc_info:
            parse_annotation(raw)

        assert exc_info.value.raw_response == raw


# ---------------------------------------------------------------------------
# SentenceAnnotator
# ---------------------------------------------------------------------------


class TestSentenceAnnotator:
    """End-to-end annotation against a fake completion client."""

    def test_successful_annotation(self, fake_llm) -> None:
        """A valid reply yields a parsed result with all three fields."""
        fake_llm.queue(json.dumps(_GOOD, ensure_ascii=False))

        result = SentenceAnnotator(fake_llm).annotate("食べます")

        assert result.is_parsed
        assert result.error is None
        assert (result.reading, result.romaji, result.translation) == (
            "たべます",
            "tabemasu",
            "I will eat.",
        )

    def test_request_shape(self, fake_llm) -> None:
        """System instruction then the sentence as the only user content."""
        fake_llm.queue(json.dumps(_GOOD))

        SentenceAnnotator(fake_llm).annotate("食べます")

        messages = fake_llm.calls[0]
        assert [m.role for m in messages] == ["system", "user"]
        assert messages[0].content == ANNOTATION_SYSTEM_PROMPT
        assert messages[1].content == "食べます"
        assert fake_llm.schemas == [Annotation]

    def test_unparseable_reply_yields_unparsed_result(
        self, fake_llm, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Non-JSON reply: all fields absent, error recorded and logged."""
        fake_llm.queue("すみません、わかりません。")

        with caplog.at_level("ERROR", logger="ttchat.annotation"):
            result = SentenceAnnotator(fake_llm).annotate("食べます")

        assert not result.is_parsed
        assert result.reading is None
        assert result.romaji is None
        assert result.translation is None
        assert result.raw_response == "すみません、わかりません。"
        assert "Invalid JSON" in result.error
        assert "Could not parse annotation reply" in caplog.text

    def test_completion_failure_yields_unparsed_result(self, fake_llm) -> None:
        """A failed completion does not raise."""
        fake_llm.queue(CompletionFailure("quota exceeded"))

        result = SentenceAnnotator(fake_llm).annotate("食べます")

        assert not result.is_parsed
        assert result.raw_response == ""
        assert result.error == "quota exceeded"
