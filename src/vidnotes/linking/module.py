"""Linking module — adds timestamp links to the section headings of a note."""

from __future__ import annotations

import math
import threading

from vidnotes.backends.base import GenerativeBackend
from vidnotes.budget.estimator import estimate_budget
from vidnotes.budget.registry import ModelLimitsRegistry
from vidnotes.errors import ConfigError, LinkingFailed
from vidnotes.linking.chunker import chunk_document, find_headings
from vidnotes.linking.passes import PassOrchestrator
from vidnotes.linking.prompts import linking_prompts, truncate_transcript
from vidnotes.linking.reconstructor import (
    count_linked_headings,
    extract_links,
    extract_transcript,
    frontmatter,
    reconstruct,
)
from vidnotes.linking.validator import validate_output
from vidnotes.models.config import PipelineConfig
from vidnotes.models.document import Chunk, Document, LinkingOutcome, LinkingReport
from vidnotes.utils.progress import log_step, log_success, log_warning


class LinkingModule:
    """Second pass: timestamp links on numbered section headings.

    Steps:
    1. Validate the note (headings, transcript, video id)
    2. Estimate the linking budget
    3. Send the body whole, or heading-bounded chunks above the threshold
    4. Validate each output, keeping the original text on rejection
    5. Rebuild the note with markers rewritten as links
    """

    name = "linking"

    def __init__(
        self,
        config: PipelineConfig,
        backend: GenerativeBackend,
        registry: ModelLimitsRegistry,
    ):
        self.config = config
        self.backend = backend
        self.registry = registry

    def resolve_video_id(self, document: Document) -> str:
        if self.config.video_id:
            return self.config.video_id
        value = frontmatter(document.metadata_block).get("video_id")
        return str(value) if value else ""

    def validate_inputs(self, document: Document) -> list[str]:
        errors = []
        if not find_headings(document.body):
            errors.append("Note has no headings to link")
        if not extract_transcript(document.metadata_block).strip():
            errors.append("Note frontmatter has no transcript")
        if not self.resolve_video_id(document):
            errors.append("No video id (pass --video-id or set video_id in the frontmatter)")
        return errors

    def run(
        self,
        document: Document,
        cancel: threading.Event | None = None,
    ) -> LinkingOutcome:
        budget_cfg = self.config.budget
        linking_cfg = self.config.linking

        headings = find_headings(document.body)
        if not headings:
            raise LinkingFailed("Note has no headings to link")

        video_id = self.resolve_video_id(document)
        if not video_id:
            raise ConfigError(
                "No video id (pass --video-id or set video_id in the frontmatter)"
            )

        transcript = extract_transcript(document.metadata_block)
        if not transcript.strip():
            raise LinkingFailed(
                "Note frontmatter has no transcript", sections=len(headings)
            )

        budget = estimate_budget(
            budget_cfg.provider,
            budget_cfg.model,
            "linking",
            registry=self.registry,
            configured_ceiling=budget_cfg.max_tokens,
            constrained=budget_cfg.constrained,
            linking_multiplier=budget_cfg.linking_multiplier,
            constrained_cap=budget_cfg.constrained_cap_tokens,
        )

        chunked = len(headings) > linking_cfg.chunk_threshold
        if chunked:
            chunk_budget = max(1, math.floor(budget.tokens * linking_cfg.chunk_fill_ratio))
            chunks = chunk_document(document.body, chunk_budget)
            # Chunked calls carry the full transcript unless the device is constrained.
            if budget_cfg.constrained:
                transcript = truncate_transcript(
                    transcript, linking_cfg.constrained_transcript_char_limit
                )
        else:
            chunks = [Chunk(index=0, text=document.body, has_heading=True)]
            transcript = truncate_transcript(
                transcript, linking_cfg.transcript_char_limit
            )

        log_step(
            "Link",
            f"{len(headings)} headings, {len(chunks)} chunk(s), "
            f"budget {budget.tokens} tokens ({budget.source})",
        )

        orchestrator = PassOrchestrator(
            self.backend,
            budget_cfg.provider,
            linking_cfg.temperature,
            retry_factor=linking_cfg.retry_factor,
        )

        def build_prompt(chunk: Chunk) -> tuple[str, str]:
            return linking_prompts(linking_cfg, video_id, transcript, chunk.text)

        def validate(text: str, chunk: Chunk):
            return validate_output(
                text,
                chunk.text,
                expected_headings=find_headings(chunk.text),
                video_id=video_id,
                require_links=True,
                reference_delimiter=linking_cfg.reference_delimiter,
                min_length_ratio=linking_cfg.min_length_ratio,
            )

        outcomes = orchestrator.run_chunks(
            chunks, build_prompt, budget, validate, cancel, label="Link"
        )
        linked = reconstruct(
            document.metadata_block, [o.text for o in outcomes], video_id
        )

        links_before = len(extract_links(document.body))
        links_after = len(extract_links(linked.body))
        report = LinkingReport(
            sections=len(headings),
            sections_linked=count_linked_headings(linked.body),
            links_added=max(0, links_after - links_before),
            chunks=len(chunks),
            chunks_sent=sum(1 for o in outcomes if o.sent),
            chunks_accepted=sum(1 for o in outcomes if o.accepted),
            chunks_failed=sum(1 for o in outcomes if o.sent and not o.accepted),
            chunked=chunked,
            cancelled=any(o.reason == "cancelled" for o in outcomes),
        )

        if report.chunks_accepted == 0 or links_after == 0:
            reason = "cancelled" if report.cancelled else "no chunk produced valid links"
            raise LinkingFailed(
                f"Linking failed: {reason}",
                sections=report.sections,
                chunks_failed=report.chunks_failed,
            )

        if report.cancelled:
            log_warning("Linking cancelled; remaining chunks kept unchanged")
        log_success(f"Linking {report.summary()}")
        return LinkingOutcome(document=linked, report=report)


def add_timestamp_links(
    document: Document,
    config: PipelineConfig,
    backend: GenerativeBackend,
    registry: ModelLimitsRegistry,
    cancel: threading.Event | None = None,
) -> LinkingOutcome:
    """Run the linking pass over one document."""
    return LinkingModule(config, backend, registry).run(document, cancel=cancel)
