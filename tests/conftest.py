"""Shared fixtures for ttchat tests."""

from __future__ import annotations

import copy
import logging
from collections.abc import Generator
from typing import Any

import pytest

from ttchat.exceptions import CompletionFailure
from ttchat.log import _CLIENT_LOGGERS
from ttchat.models.message import Message
from ttchat.store import TranscriptStore


class FakeTable:
    """In-memory stand-in for a boto3 DynamoDB ``Table`` resource.

    Only the three calls :class:`~ttchat.store.TranscriptStore` makes are
    supported.  Items are deep-copied on the way in and out, like a real
    round trip through the service.
    """

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []
        self.puts: list[dict[str, Any]] = []

    def get_item(self, Key: dict[str, str]) -> dict[str, Any]:  # noqa: N803
        self.calls.append("get_item")
        item = self.items.get(Key["convId"])
        return {} if item is None else {"Item": copy.deepcopy(item)}

    def put_item(self, Item: dict[str, Any]) -> dict[str, Any]:  # noqa: N803
        self.calls.append("put_item")
        self.puts.append(copy.deepcopy(Item))
        self.items[Item["convId"]] = copy.deepcopy(Item)
        return {}

    def update_item(self, Key: dict[str, str], **kwargs: Any) -> dict[str, Any]:  # noqa: N803
        self.calls.append("update_item")
        item = self.items.setdefault(Key["convId"], {"convId": Key["convId"]})
        item["chat"] = copy.deepcopy(kwargs["ExpressionAttributeValues"][":chat"])
        return {}


class FakeLLM:
    """Completion client that replays queued replies.

    Each queued entry is either a reply string or an exception instance to
    raise.  Every call records a copy of the messages it was given.
    """

    model = "fake-model"

    def __init__(self, *replies: str | Exception) -> None:
        self._replies = list(replies)
        self.calls: list[list[Message]] = []
        self.schemas: list[type | None] = []

    def queue(self, *replies: str | Exception) -> None:
        self._replies.extend(replies)

    def complete(self, messages: list[Message], response_schema: type | None = None) -> str:
        self.calls.append(list(messages))
        self.schemas.append(response_schema)
        if not self._replies:
            raise CompletionFailure("no reply queued")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not reply.strip():
            raise CompletionFailure("Gemini returned an empty reply")
        return reply.strip()


@pytest.fixture()
def fake_table() -> FakeTable:
    """Return an empty in-memory DynamoDB table."""
    return FakeTable()


@pytest.fixture()
def store(fake_table: FakeTable) -> TranscriptStore:
    """Return a :class:`TranscriptStore` backed by ``fake_table``."""
    return TranscriptStore(table_name="ttchat-test", table=fake_table)


@pytest.fixture()
def fake_llm() -> FakeLLM:
    """Return a completion client with no replies queued."""
    return FakeLLM()


@pytest.fixture()
def monkeypatch_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all required environment variables to valid defaults.

    Also patches ``load_dotenv`` so that a real ``.env`` file on disk does not
    override the test values.

    Returns the dict of variables so tests can inspect or override values.
    """
    monkeypatch.setattr("ttchat.config.load_dotenv", lambda *_a, **_kw: None)
    env_vars = {"GEMINI_API_KEY": "test-gemini-key-12345"}
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    for key in ("PORT", "GEMINI_MODEL", "TTCHAT_TABLE", "AWS_REGION", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return env_vars


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all ttchat-related environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("ttchat.config.load_dotenv", lambda *_a, **_kw: None)
    for key in (
        "GEMINI_API_KEY",
        "PORT",
        "GEMINI_MODEL",
        "TTCHAT_TABLE",
        "AWS_REGION",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    client_levels = {name: logging.getLogger(name).level for name in _CLIENT_LOGGERS}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in client_levels.items():
        logging.getLogger(name).setLevel(level)
