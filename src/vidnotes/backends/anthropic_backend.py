"""Claude backend via the anthropic SDK."""

from __future__ import annotations

import os
from typing import Any

from vidnotes.backends.base import BackendError, classify_error
from vidnotes.utils.progress import log_debug
from vidnotes.utils.retry import TRANSIENT_ERRORS, retry_api


class AnthropicBackend:
    """Calls the Messages API with a system prompt and one user turn."""

    def __init__(
        self,
        model: str,
        *,
        api_key: str | None = None,
        client: Any = None,
        max_attempts: int = 3,
    ):
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic package not installed. "
                "Install with: pip install vidnotes[llm]"
            )

        if client is None:
            api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise BackendError("ANTHROPIC_API_KEY not set")
            client = anthropic.Anthropic(api_key=api_key)

        self.model = model
        self._client = client
        self._max_attempts = max_attempts
        self._transient = TRANSIENT_ERRORS + (
            anthropic.APIConnectionError,
            anthropic.RateLimitError,
            anthropic.InternalServerError,
        )

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
        provider: str = "anthropic",
    ) -> str:
        create = retry_api(self._max_attempts, exceptions=self._transient)(
            self._client.messages.create
        )
        log_debug("Anthropic", f"{self.model} max_tokens={max_output_tokens}")
        try:
            message = create(
                model=self.model,
                max_tokens=max_output_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            raise classify_error(e) from e

        if message.stop_reason == "max_tokens":
            raise BackendError(
                f"Response truncated after {max_output_tokens} output tokens"
            )

        return "".join(
            block.text for block in message.content if block.type == "text"
        )
