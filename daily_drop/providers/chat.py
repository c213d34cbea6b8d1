"""Chat-completion client shared by every configured text-generation provider.

OpenAI, Groq and DeepSeek all speak the same chat-completions dialect, so one
class covers them; only endpoint, credential and model differ.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from daily_drop.providers.errors import (
    EmptyCompletion,
    HttpError,
    MalformedJson,
    MissingCredential,
    RequestFailed,
)

logger = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
DEEPSEEK_URL = "https://api.deepseek.com/chat/completions"


def _strip_markdown_fence(raw: str) -> str:
    if not raw:
        return raw
    stripped = raw.strip()
    if not stripped.startswith("```"):
        return stripped
    content = stripped[3:].lstrip()
    if content.lower().startswith("json"):
        content = content[4:]
    content = content.lstrip()
    closing = content.rfind("```")
    if closing != -1:
        content = content[:closing]
    return content.strip() or stripped


def _extract_completion_text(data) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return None
    return content.strip() or None


def user_message(date_iso: str, season, hemisphere) -> str:
    season = getattr(season, "value", season)
    hemisphere = getattr(hemisphere, "value", hemisphere)
    return (
        f"Today is {date_iso}. Hemisphere: {hemisphere}. Season: {season}. "
        "Please produce one JSON recipe as specified."
    )


@dataclass
class ChatCompletionProvider:
    name: str
    url: str
    model: str
    api_key: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: float = 30.0

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, date_iso: str, season, hemisphere, system_prompt: str) -> dict:
        """Ask the provider for one recipe document and return it parsed.

        Raises a ProviderError subclass on every failure; the only check made on
        the result is that it is a JSON object.
        """
        if not self.configured:
            raise MissingCredential(self.name)

        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message(date_iso, season, hemisphere)},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.debug("POST %s model=%s", self.url, self.model)
        try:
            resp = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestFailed(self.name, f"request failed: {e}") from e

        if not resp.ok:
            raise HttpError(self.name, resp.status_code, resp.text or "")

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedJson(self.name, "response body is not JSON") from e

        text = _extract_completion_text(data)
        if not text:
            raise EmptyCompletion(self.name)

        try:
            doc = json.loads(_strip_markdown_fence(text))
        except ValueError as e:
            logger.debug("%s completion snippet: %s", self.name, text[:200])
            raise MalformedJson(self.name, f"completion is not valid JSON: {e}") from e
        if not isinstance(doc, dict):
            raise MalformedJson(self.name, f"expected a JSON object, got {type(doc).__name__}")
        return doc


def build_providers(settings) -> List[ChatCompletionProvider]:
    """Providers in try order. Unconfigured ones are included and fail fast."""
    timeout = settings.timeout_seconds
    return [
        ChatCompletionProvider("OpenAI", OPENAI_URL, settings.OPENAI_MODEL, settings.OPENAI_API_KEY, timeout=timeout),
        ChatCompletionProvider("Groq", GROQ_URL, settings.GROQ_MODEL, settings.GROQ_API_KEY, timeout=timeout),
        ChatCompletionProvider("DeepSeek", DEEPSEEK_URL, settings.DEEPSEEK_MODEL, settings.DEEPSEEK_API_KEY, timeout=timeout),
    ]
