"""Configuration loading for ttchat.

Reads settings from environment variables (with .env support via python-dotenv)
and validates that all required values are present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 1994


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        gemini_api_key: API key for Google Gemini.
        port: TCP port the HTTP server listens on (default ``1994``).
        model: Gemini model identifier used for every completion.
        table_name: DynamoDB table holding the transcripts.
        aws_region: AWS region for the DynamoDB client, or ``None`` to
            use the boto3 default resolution chain.
        log_level: Logging level (default ``"INFO"``).
    """

    gemini_api_key: str
    port: int = DEFAULT_PORT
    model: str = "gemini-2.0-flash"
    table_name: str = "ttchat"
    aws_region: str | None = None
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"Settings(gemini_api_key='***', "
            f"port={self.port!r}, "
            f"model={self.model!r}, "
            f"table_name={self.table_name!r}, "
            f"aws_region={self.aws_region!r}, "
            f"log_level={self.log_level!r})"
        )


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"PORT must be between 1 and 65535, got {port}")
    return port


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the project root
    is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If ``GEMINI_API_KEY`` is missing, empty, or
            whitespace-only, or if ``PORT`` is not a valid port number.
    """
    load_dotenv()

    api_key = os.environ.get("GEMINI_API_KEY", "")
    if not api_key.strip():
        raise ConfigError("Missing required environment variable: GEMINI_API_KEY")

    values: dict[str, object] = {"gemini_api_key": api_key}

    # Optional settings with defaults handled by the dataclass.
    optional = {
        "GEMINI_MODEL": "model",
        "TTCHAT_TABLE": "table_name",
        "AWS_REGION": "aws_region",
        "LOG_LEVEL": "log_level",
    }
    for env_var, field_name in optional.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = raw

    port = os.environ.get("PORT", "").strip()
    if port:
        values["port"] = _parse_port(port)

    return Settings(**values)  # type: ignore[arg-type]
