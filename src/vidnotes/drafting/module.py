"""Drafting module — first pass from annotated transcript to structured note."""

from __future__ import annotations

from ruamel.yaml.scalarstring import LiteralScalarString

from vidnotes.backends.base import GenerativeBackend
from vidnotes.budget.estimator import estimate_budget, estimate_tokens, safe_max_tokens
from vidnotes.budget.registry import ModelLimitsRegistry
from vidnotes.errors import DraftFailed
from vidnotes.ingestion.bucketer import UNFORMATTABLE_TRANSCRIPT, format_annotated_transcript
from vidnotes.linking.chunker import heading_count
from vidnotes.linking.passes import PassOrchestrator
from vidnotes.linking.prompts import drafting_prompts
from vidnotes.models.config import PipelineConfig
from vidnotes.models.document import Document
from vidnotes.models.transcript import TranscriptSegment
from vidnotes.utils.io import dump_yaml_string
from vidnotes.utils.progress import log_step, log_success, log_warning


def video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def build_metadata_block(
    *,
    title: str,
    url: str,
    video_id: str,
    transcript: str,
) -> str:
    """Render the YAML frontmatter, transcript as a literal block scalar."""
    data = {
        "title": title,
        "url": url,
        "video_id": video_id,
        "transcript": LiteralScalarString(transcript),
    }
    return "---\n" + dump_yaml_string(data) + "---\n"


def draft_note(
    segments: list[TranscriptSegment],
    config: PipelineConfig,
    backend: GenerativeBackend,
    registry: ModelLimitsRegistry,
    title: str = "",
    url: str = "",
) -> Document:
    """Summarize the transcript into a note carrying it in its frontmatter."""
    budget_cfg = config.budget
    video_id = config.video_id

    transcript = format_annotated_transcript(
        segments, min_duration=config.drafting.bucket_seconds
    )
    if transcript == UNFORMATTABLE_TRANSCRIPT:
        raise DraftFailed("Transcript has no usable text")

    budget = estimate_budget(
        budget_cfg.provider,
        budget_cfg.model,
        "first",
        registry=registry,
        configured_ceiling=budget_cfg.max_tokens,
        constrained=budget_cfg.constrained,
        constrained_cap=budget_cfg.constrained_cap_tokens,
    )
    system_prompt, user_prompt = drafting_prompts(config.drafting, transcript)

    clamped = safe_max_tokens(
        budget_cfg.provider,
        budget_cfg.model,
        estimate_tokens(system_prompt + user_prompt),
        budget.tokens,
        registry=registry,
    )
    if clamped < budget.tokens:
        log_warning(f"Long transcript: output budget clamped to {clamped} tokens")
        budget = budget.model_copy(update={"tokens": clamped})

    log_step("Draft", f"{len(segments)} segments, budget {budget.tokens} tokens")

    orchestrator = PassOrchestrator(
        backend,
        budget_cfg.provider,
        config.drafting.temperature,
        retry_factor=config.linking.retry_factor,
    )
    result = orchestrator.run(system_prompt, user_prompt, budget)
    if not result.ok:
        raise DraftFailed(f"Drafting failed ({result.status}): {result.reason}")

    body = "\n" + result.text.strip() + "\n"
    headings = heading_count(body)
    if headings == 0:
        log_warning("Draft has no headings; the linking pass will have nothing to link")

    metadata = build_metadata_block(
        title=title or video_id,
        url=url or (video_url(video_id) if video_id else ""),
        video_id=video_id,
        transcript=transcript,
    )
    log_success(f"Drafted note with {headings} headings")
    return Document(metadata_block=metadata, body=body)
