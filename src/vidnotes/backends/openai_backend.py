"""OpenAI-compatible chat completions backend (OpenAI, Ollama, Gemini)."""

from __future__ import annotations

import os
from typing import Any

from vidnotes.backends.base import BackendError, classify_error
from vidnotes.utils.progress import log_debug
from vidnotes.utils.retry import TRANSIENT_ERRORS, retry_api

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/v1"
GOOGLE_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _connection_settings(provider: str, api_key: str | None) -> dict[str, str]:
    if provider == "ollama":
        return {
            "base_url": os.environ.get("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL),
            # Ollama ignores the key but the client requires one.
            "api_key": api_key or "ollama",
        }
    if provider == "google":
        key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not key:
            raise BackendError("GEMINI_API_KEY not set")
        return {"base_url": GOOGLE_BASE_URL, "api_key": key}

    key = api_key or os.environ.get("OPENAI_API_KEY")
    if not key:
        raise BackendError("OPENAI_API_KEY not set")
    return {"api_key": key}


class OpenAIBackend:
    """Chat completions with a system and a user message."""

    def __init__(
        self,
        model: str,
        *,
        provider: str = "openai",
        api_key: str | None = None,
        client: Any = None,
        max_attempts: int = 3,
    ):
        try:
            import openai
        except ImportError:
            raise ImportError(
                "openai package not installed. "
                "Install with: pip install vidnotes[llm]"
            )

        if client is None:
            client = openai.OpenAI(**_connection_settings(provider, api_key))

        self.model = model
        self.provider = provider
        self._client = client
        self._max_attempts = max_attempts
        self._transient = TRANSIENT_ERRORS + (
            openai.APIConnectionError,
            openai.RateLimitError,
            openai.InternalServerError,
        )

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
        provider: str = "openai",
    ) -> str:
        create = retry_api(self._max_attempts, exceptions=self._transient)(
            self._client.chat.completions.create
        )
        log_debug("OpenAI", f"{self.provider}/{self.model} max_tokens={max_output_tokens}")
        try:
            response = create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_output_tokens,
            )
        except Exception as e:
            raise classify_error(e) from e

        if not response.choices:
            raise BackendError("Response contained no choices")

        choice = response.choices[0]
        if choice.finish_reason == "length":
            raise BackendError(
                f"Response truncated after {max_output_tokens} output tokens"
            )
        return choice.message.content or ""
