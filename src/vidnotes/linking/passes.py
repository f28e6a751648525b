"""Pass orchestration — one backend call per chunk with retry-on-overflow."""

from __future__ import annotations

import threading
from typing import Callable

from vidnotes.backends.base import BackendOverflowError, GenerativeBackend
from vidnotes.models.document import Chunk, ChunkOutcome, PassResult, ValidationResult
from vidnotes.models.limits import TokenBudget
from vidnotes.utils.progress import log_debug, log_step, log_warning, truncate_for_log

PromptBuilder = Callable[[Chunk], tuple[str, str]]
Validator = Callable[[str, Chunk], ValidationResult]


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the whole output."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return text
    lines = stripped.split("\n")
    if len(lines) < 2 or not lines[-1].strip().startswith("```"):
        return text
    return "\n".join(lines[1:-1])


class PassOrchestrator:
    """Drives backend calls under a token budget.

    An overflow is retried once with a reduced budget and identical prompts.
    Any other failure is reported without retrying.
    """

    def __init__(
        self,
        backend: GenerativeBackend,
        provider: str,
        temperature: float,
        retry_factor: float = 0.5,
    ):
        self.backend = backend
        self.provider = provider
        self.temperature = temperature
        self.retry_factor = retry_factor

    def run(
        self,
        system_prompt: str,
        user_prompt: str,
        budget: TokenBudget,
    ) -> PassResult:
        current = budget
        attempts = 0

        while True:
            attempts += 1
            try:
                text = self.backend.call(
                    system_prompt,
                    user_prompt,
                    self.temperature,
                    current.tokens,
                    self.provider,
                )
            except BackendOverflowError as e:
                if attempts == 1:
                    reduced = current.reduced(self.retry_factor)
                    log_warning(
                        f"Output limit hit at {current.tokens} tokens, "
                        f"retrying with {reduced.tokens}"
                    )
                    current = reduced
                    continue
                return PassResult(
                    status="overflow",
                    reason=str(e),
                    attempts=attempts,
                    budget_tokens=current.tokens,
                )
            except Exception as e:
                return PassResult(
                    status="failure",
                    reason=str(e) or type(e).__name__,
                    attempts=attempts,
                    budget_tokens=current.tokens,
                )

            text = strip_code_fences(text)
            if not text.strip():
                return PassResult(
                    status="failure",
                    reason="empty output",
                    attempts=attempts,
                    budget_tokens=current.tokens,
                )

            log_debug("Pass", f"Received {truncate_for_log(text, 120)!r}")
            return PassResult(
                status="ok",
                text=text,
                attempts=attempts,
                budget_tokens=current.tokens,
            )

    def run_chunks(
        self,
        chunks: list[Chunk],
        build_prompt: PromptBuilder,
        budget: TokenBudget,
        validate: Validator,
        cancel: threading.Event | None = None,
        *,
        label: str = "Pass",
    ) -> list[ChunkOutcome]:
        """Process chunks strictly in order.

        Chunks without a heading pass through untouched. A chunk whose call
        fails or whose output is rejected keeps its original text. ``cancel``
        is checked between chunks only.
        """
        outcomes: list[ChunkOutcome] = []
        sendable = sum(1 for c in chunks if c.has_heading)
        sent = 0

        for chunk in chunks:
            if not chunk.has_heading:
                outcomes.append(ChunkOutcome(index=chunk.index, text=chunk.text))
                continue

            if cancel is not None and cancel.is_set():
                outcomes.append(
                    ChunkOutcome(index=chunk.index, text=chunk.text, reason="cancelled")
                )
                continue

            sent += 1
            log_step(label, f"Chunk {sent}/{sendable} ({len(chunk.text)} chars)")
            system_prompt, user_prompt = build_prompt(chunk)
            result = self.run(system_prompt, user_prompt, budget)

            if not result.ok:
                log_warning(
                    f"Chunk {sent}/{sendable} kept unchanged ({result.status}: {result.reason})"
                )
                outcomes.append(ChunkOutcome(
                    index=chunk.index,
                    text=chunk.text,
                    sent=True,
                    reason=result.reason,
                    attempts=result.attempts,
                ))
                continue

            text = result.text
            if chunk.text.endswith("\n") and not text.endswith("\n"):
                text += "\n"

            verdict = validate(text, chunk)
            if not verdict.accepted:
                log_warning(f"Chunk {sent}/{sendable} kept unchanged ({verdict.reason})")
                outcomes.append(ChunkOutcome(
                    index=chunk.index,
                    text=chunk.text,
                    sent=True,
                    reason=verdict.reason,
                    attempts=result.attempts,
                ))
                continue

            outcomes.append(ChunkOutcome(
                index=chunk.index,
                text=text,
                sent=True,
                accepted=True,
                attempts=result.attempts,
            ))

        return outcomes
