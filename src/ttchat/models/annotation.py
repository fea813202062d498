"""Models for the sentence annotation service.

- :class:`Annotation` -- the fully-populated record the model is asked to
  return; also passed to Gemini as ``response_schema``.
- :class:`AnnotationResult` -- either a parsed :class:`Annotation` or an
  explicit unparsed outcome carrying the raw reply and the parse error.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel


class Annotation(BaseModel):
    """Reading aids for one Japanese sentence.

    Attributes:
        reading: The sentence with kanji replaced by their kana reading.
        romaji: The sentence in romaji only.
        translation: English translation.
    """

    reading: str
    romaji: str
    translation: str


@dataclass(frozen=True)
class AnnotationResult:
    """Outcome of a single annotation request.

    Exactly one of two shapes:

    - parsed: ``annotation`` is set, ``error`` is ``None``.
    - unparsed: ``annotation`` is ``None`` and ``error`` describes why the
      reply could not be used.  ``raw_response`` holds whatever text the
      model returned (possibly empty).

    Attributes:
        annotation: The parsed record, or ``None`` when unparsed.
        raw_response: Raw reply text from the model.
        error: Human-readable failure reason for the unparsed variant.
    """

    annotation: Annotation | None = None
    raw_response: str = ""
    error: str | None = None

    @classmethod
    def parsed(cls, annotation: Annotation, raw_response: str = "") -> AnnotationResult:
        return cls(annotation=annotation, raw_response=raw_response)

    @classmethod
    def unparsed(cls, error: str, raw_response: str = "") -> AnnotationResult:
        return cls(annotation=None, raw_response=raw_response, error=error)

    @property
    def is_parsed(self) -> bool:
        return self.annotation is not None

    @property
    def reading(self) -> str | None:
        return self.annotation.reading if self.annotation else None

    @property
    def romaji(self) -> str | None:
        return self.annotation.romaji if self.annotation else None

    @property
    def translation(self) -> str | None:
        return self.annotation.translation if self.annotation else None
