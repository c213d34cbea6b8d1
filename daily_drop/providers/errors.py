"""Provider failures. All of them are non-fatal to a run: the orchestrator logs
the reason and moves on to the next provider."""

from __future__ import annotations


class ProviderError(Exception):
    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class MissingCredential(ProviderError):
    def __init__(self, provider: str):
        super().__init__(provider, "no API key configured")


class RequestFailed(ProviderError):
    """Transport-level failure (connection refused, timeout, ...)."""


class HttpError(ProviderError):
    def __init__(self, provider: str, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(provider, f"HTTP {status} {body[:300]}")


class EmptyCompletion(ProviderError):
    def __init__(self, provider: str):
        super().__init__(provider, "response carried no completion text")


class MalformedJson(ProviderError):
    pass


class InvalidShape(ProviderError):
    pass
