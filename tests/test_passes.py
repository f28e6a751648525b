"""Tests for pass orchestration and retry-on-overflow."""

from __future__ import annotations

import threading

from conftest import FakeBackend

from vidnotes.backends.base import BackendError, BackendOverflowError
from vidnotes.linking.passes import PassOrchestrator, strip_code_fences
from vidnotes.models.document import Chunk, ValidationResult
from vidnotes.models.limits import TokenBudget

BUDGET = TokenBudget(tokens=1000, pass_type="linking")


def orchestrator(backend: FakeBackend) -> PassOrchestrator:
    return PassOrchestrator(backend, "anthropic", 0.2)


class TestRun:
    def test_success_first_try(self) -> None:
        backend = FakeBackend(["## 1. A [TimeIndex:5]"])
        result = orchestrator(backend).run("sys", "user", BUDGET)
        assert result.ok
        assert result.attempts == 1
        assert backend.calls[0]["max_output_tokens"] == 1000
        assert backend.calls[0]["temperature"] == 0.2
        assert backend.calls[0]["provider"] == "anthropic"

    def test_overflow_then_success_at_half_budget(self) -> None:
        backend = FakeBackend([BackendOverflowError("max_tokens too large"), "ok text"])
        result = orchestrator(backend).run("sys", "user", BUDGET)
        assert result.ok
        assert result.attempts == 2
        assert result.budget_tokens == 500
        assert [c["max_output_tokens"] for c in backend.calls] == [1000, 500]
        assert backend.calls[0]["user_prompt"] == backend.calls[1]["user_prompt"]

    def test_second_overflow_is_chunk_failure(self) -> None:
        backend = FakeBackend([
            BackendOverflowError("max_tokens"),
            BackendOverflowError("max_tokens"),
            "never used",
        ])
        result = orchestrator(backend).run("sys", "user", BUDGET)
        assert result.status == "overflow"
        assert len(backend.calls) == 2

    def test_other_backend_error_not_retried(self) -> None:
        backend = FakeBackend([BackendError("401 unauthorized"), "never used"])
        result = orchestrator(backend).run("sys", "user", BUDGET)
        assert result.status == "failure"
        assert "401" in result.reason
        assert len(backend.calls) == 1

    def test_unexpected_exception_is_failure(self) -> None:
        result = orchestrator(FakeBackend([ValueError("bad")])).run("sys", "user", BUDGET)
        assert result.status == "failure"

    def test_empty_output_is_failure(self) -> None:
        result = orchestrator(FakeBackend(["  \n "])).run("sys", "user", BUDGET)
        assert result.status == "failure"
        assert result.reason == "empty output"

    def test_code_fence_stripped(self) -> None:
        result = orchestrator(FakeBackend(["```markdown\n## 1. A\ntext\n```"])).run("s", "u", BUDGET)
        assert result.text == "## 1. A\ntext"


class TestStripCodeFences:
    def test_unfenced_untouched(self) -> None:
        assert strip_code_fences("plain\n") == "plain\n"

    def test_unclosed_fence_untouched(self) -> None:
        assert strip_code_fences("```\ntext") == "```\ntext"


def _accept(text: str, chunk: Chunk) -> ValidationResult:
    if "[TimeIndex:" in text:
        return ValidationResult.ok()
    return ValidationResult.reject("no timestamp links")


CHUNKS = [
    Chunk(index=0, text="Preamble.\n", has_heading=False),
    Chunk(index=1, text="## 1. A\nalpha\n", has_heading=True),
    Chunk(index=2, text="## 2. B\nbeta\n", has_heading=True),
]


def _prompt(chunk: Chunk) -> tuple[str, str]:
    return "sys", chunk.text


class TestRunChunks:
    def test_rejected_chunk_keeps_original(self) -> None:
        backend = FakeBackend(["## 1. A [TimeIndex:5]\nalpha", "## 2. B\nbeta, rewritten\n"])
        outcomes = orchestrator(backend).run_chunks(CHUNKS, _prompt, BUDGET, _accept)

        assert len(backend.calls) == 2
        assert not outcomes[0].sent
        assert outcomes[0].text == "Preamble.\n"
        assert outcomes[1].accepted
        assert outcomes[1].text == "## 1. A [TimeIndex:5]\nalpha\n"
        assert not outcomes[2].accepted
        assert outcomes[2].text == CHUNKS[2].text
        assert outcomes[2].reason == "no timestamp links"

    def test_failed_call_keeps_original(self) -> None:
        backend = FakeBackend([BackendError("boom"), "## 2. B [TimeIndex:9]\nbeta\n"])
        outcomes = orchestrator(backend).run_chunks(CHUNKS, _prompt, BUDGET, _accept)
        assert outcomes[1].text == CHUNKS[1].text
        assert outcomes[1].sent and not outcomes[1].accepted
        assert outcomes[2].accepted

    def test_cancel_checked_between_chunks(self) -> None:
        cancel = threading.Event()

        def handler(user_prompt: str, max_tokens: int) -> str:
            cancel.set()
            return user_prompt.replace("\n", " [TimeIndex:1]\n", 1)

        backend = FakeBackend(handler=handler)
        outcomes = orchestrator(backend).run_chunks(CHUNKS, _prompt, BUDGET, _accept, cancel)

        assert len(backend.calls) == 1
        assert outcomes[1].accepted
        assert outcomes[2].reason == "cancelled"
        assert outcomes[2].text == CHUNKS[2].text
