"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import os
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Load the JSON schema from file so it can be edited without touching code.
_schema_path = Path(__file__).parent / "schemas" / "recipe_document_schema.json"
if _schema_path.exists():
    with open(_schema_path, "r", encoding="utf8") as _fh:
        RECIPE_DOCUMENT_SCHEMA = json.load(_fh)
else:
    RECIPE_DOCUMENT_SCHEMA = {}

DEFAULT_PROMPT_PATH = str(Path(__file__).parent / "templates" / "system-daily-drop.txt")


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _env(name: str, default: str | None = None):
    # read at instantiation so a .env loaded by the CLI is picked up
    return field(default_factory=lambda: _get(name, default))


@dataclass
class Settings:
    # API keys (each optional; a missing key only skips that provider)
    OPENAI_API_KEY: str | None = _env("OPENAI_API_KEY", "")
    GROQ_API_KEY: str | None = _env("GROQ_API_KEY", "")
    DEEPSEEK_API_KEY: str | None = _env("DEEPSEEK_API_KEY", "")

    # Model ids
    OPENAI_MODEL: str = _env("OPENAI_MODEL", "gpt-4o-mini")
    GROQ_MODEL: str = _env("GROQ_MODEL", "llama-3.1-8b-instant")
    DEEPSEEK_MODEL: str = _env("DEEPSEEK_MODEL", "deepseek-chat")

    # Anything starting with "s" selects the Southern hemisphere
    HEMISPHERE: str = _env("DAILY_DROP_HEMISPHERE", "Northern")
    OUT_DIR: str = _env("DAILY_DROP_OUT_DIR", "recipes")
    PROMPT_PATH: str = _env("DAILY_DROP_PROMPT_PATH", DEFAULT_PROMPT_PATH)
    # Seconds per provider request
    REQUEST_TIMEOUT: str = _env("DAILY_DROP_TIMEOUT", "30")

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _env("LOG_FILE", None)

    @property
    def timeout_seconds(self) -> float:
        try:
            return float(self.REQUEST_TIMEOUT)
        except (TypeError, ValueError):
            logger.warning("Invalid DAILY_DROP_TIMEOUT %r; using 30 seconds", self.REQUEST_TIMEOUT)
            return 30.0


settings = Settings()
