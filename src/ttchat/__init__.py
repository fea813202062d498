"""ttchat: Japanese conversation-practice chat backend.

Forwards chat turns to Google Gemini, keeps each conversation's
transcript in DynamoDB, and explains single sentences with kana reading,
romaji and translation.
"""

from __future__ import annotations

from ttchat.annotation import SentenceAnnotator, parse_annotation
from ttchat.exceptions import CompletionFailure, MalformedAnnotation, StoreUnavailable
from ttchat.llm import GeminiClient, SamplingConfig
from ttchat.models.annotation import Annotation, AnnotationResult
from ttchat.models.message import Message
from ttchat.session import FAILED_REPLY, ChatReply, ConversationSession
from ttchat.store import TranscriptStore

__version__ = "0.1.0"

__all__ = [
    "FAILED_REPLY",
    "Annotation",
    "AnnotationResult",
    "ChatReply",
    "CompletionFailure",
    "ConversationSession",
    "GeminiClient",
    "MalformedAnnotation",
    "Message",
    "SamplingConfig",
    "SentenceAnnotator",
    "StoreUnavailable",
    "TranscriptStore",
    "parse_annotation",
]
