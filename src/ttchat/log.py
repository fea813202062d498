"""Logging setup for the ttchat server.

One stderr handler on the root logger, shared by ttchat's modules and by
uvicorn (which is started with ``log_config=None`` and so propagates to
root).  The AWS and HTTP client libraries log every request at INFO and
DEBUG; they are held at WARNING unless the server runs at DEBUG.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_HANDLER_ATTR = "_ttchat_log_handler"

_CLIENT_LOGGERS = ("boto3", "botocore", "urllib3", "httpx", "httpcore", "google_genai")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the server.

    Safe to call more than once: the ttchat handler is added only the
    first time and re-levelled afterwards.

    Args:
        level: A standard logging level name, case-insensitive.

    Raises:
        ValueError: If *level* is not a recognised logging level string.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)

    client_level = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)

    handler = next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        setattr(handler, _HANDLER_ATTR, True)
        root.addHandler(handler)
    handler.setLevel(numeric_level)
