"""Translation pass — translates a note body, keeping structure and links."""

from __future__ import annotations

import math
import re
import threading

from vidnotes.backends.base import GenerativeBackend
from vidnotes.budget.estimator import estimate_budget
from vidnotes.budget.registry import ModelLimitsRegistry
from vidnotes.errors import TranslationFailed
from vidnotes.linking.chunker import chunk_document, find_headings, heading_count
from vidnotes.linking.passes import PassOrchestrator
from vidnotes.linking.prompts import translation_prompts
from vidnotes.models.config import PipelineConfig
from vidnotes.models.document import Chunk, Document, ValidationResult
from vidnotes.utils.progress import log_step, log_success

WATCH_URL_RE = re.compile(r"https://www\.youtube\.com/watch\?v=[A-Za-z0-9_-]+&t=\d+")


def validate_translation(
    candidate: str,
    original: str,
    *,
    reference_delimiter: str,
) -> ValidationResult:
    """Translated text keeps headings and links, and echoes no reference block."""
    if not candidate.strip():
        return ValidationResult.reject("empty output")
    if heading_count(candidate) < heading_count(original):
        return ValidationResult.reject("heading count dropped")
    if WATCH_URL_RE.search(original) and not WATCH_URL_RE.search(candidate):
        return ValidationResult.reject("links lost")
    if reference_delimiter and reference_delimiter in candidate:
        return ValidationResult.reject("reference material echoed")
    return ValidationResult.ok()


def translate_body(
    document: Document,
    config: PipelineConfig,
    backend: GenerativeBackend,
    registry: ModelLimitsRegistry,
    language: str,
    cancel: threading.Event | None = None,
) -> Document:
    """Translate the body of ``document`` into ``language``.

    Uses the same chunking as the linking pass; rejected chunks keep their
    original text. The metadata block is untouched.
    """
    budget_cfg = config.budget
    linking_cfg = config.linking

    budget = estimate_budget(
        budget_cfg.provider,
        budget_cfg.model,
        "first",
        registry=registry,
        configured_ceiling=budget_cfg.max_tokens,
        constrained=budget_cfg.constrained,
        constrained_cap=budget_cfg.constrained_cap_tokens,
    )

    if heading_count(document.body) > linking_cfg.chunk_threshold:
        chunk_budget = max(1, math.floor(budget.tokens * linking_cfg.chunk_fill_ratio))
        chunks = chunk_document(document.body, chunk_budget)
    else:
        # Whole body in one call; a body without headings is still translated.
        chunks = [Chunk(index=0, text=document.body, has_heading=True)]

    log_step("Translate", f"{language}: {len(chunks)} chunk(s), budget {budget.tokens} tokens")

    orchestrator = PassOrchestrator(
        backend,
        budget_cfg.provider,
        config.translation.temperature,
        retry_factor=linking_cfg.retry_factor,
    )
    outcomes = orchestrator.run_chunks(
        chunks,
        lambda chunk: translation_prompts(config.translation, language, chunk.text),
        budget,
        lambda text, chunk: validate_translation(
            text, chunk.text, reference_delimiter=linking_cfg.reference_delimiter
        ),
        cancel,
        label="Translate",
    )

    accepted = sum(1 for o in outcomes if o.accepted)
    if accepted == 0:
        raise TranslationFailed("Translation failed: no chunk was translated")

    translated = Document(
        metadata_block=document.metadata_block,
        body="".join(o.text for o in outcomes),
    )
    log_success(
        f"Translated {accepted}/{sum(1 for o in outcomes if o.sent)} chunk(s), "
        f"{len(find_headings(translated.body))} headings"
    )
    return translated
