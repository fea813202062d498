"""Data models for ttchat."""

from __future__ import annotations

from ttchat.models.annotation import Annotation, AnnotationResult
from ttchat.models.message import (
    Message,
    Role,
    transcript_from_records,
    transcript_to_records,
)

__all__ = [
    "Annotation",
    "AnnotationResult",
    "Message",
    "Role",
    "transcript_from_records",
    "transcript_to_records",
]
