"""File-level pipeline runner — read a note, run a pass, write on success."""

from __future__ import annotations

import threading
import time
from pathlib import Path

from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from vidnotes.backends.base import GenerativeBackend
from vidnotes.budget.registry import ModelLimitsRegistry
from vidnotes.errors import ConfigError, LinkingFailed, VidnotesError
from vidnotes.models.config import PipelineConfig
from vidnotes.models.document import Document, LinkingOutcome
from vidnotes.utils.io import read_text, write_atomic
from vidnotes.utils.progress import log, log_error, log_step, show_run_summary

DEFAULT_CONFIG_NAME = "vidnotes.yaml"


def load_config(
    config_path: Path | str | None = None,
    *,
    video_id: str | None = None,
    **budget_overrides,
) -> PipelineConfig:
    """Build the run configuration from YAML plus command-line overrides.

    Without an explicit path, ``vidnotes.yaml`` in the working directory is
    used when present; otherwise defaults apply.
    """
    path: Path | None = Path(config_path) if config_path else None
    if path is None and Path(DEFAULT_CONFIG_NAME).exists():
        path = Path(DEFAULT_CONFIG_NAME)

    try:
        if path is None:
            config = PipelineConfig()
        elif not path.exists():
            raise ConfigError(f"Config not found: {path}")
        else:
            config = PipelineConfig.from_yaml(path)
            log_step("Config", f"Loaded {path}")
        config = config.with_overrides(**budget_overrides)
    except (ValidationError, YAMLError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    return config.with_video_id(video_id)


def load_registry(config: PipelineConfig) -> ModelLimitsRegistry:
    try:
        return ModelLimitsRegistry.from_overrides_file(config.budget.overrides_path)
    except (ValidationError, YAMLError, OSError) as e:
        raise ConfigError(f"Invalid model overrides: {e}") from e


def _backend(config: PipelineConfig, backend: GenerativeBackend | None) -> GenerativeBackend:
    if backend is not None:
        return backend
    from vidnotes.backends.factory import create_backend

    return create_backend(config.budget)


def read_note(note_path: Path | str) -> Document:
    from vidnotes.linking.reconstructor import split_document

    note_path = Path(note_path)
    if not note_path.exists():
        raise VidnotesError(f"Note not found: {note_path}")
    return split_document(read_text(note_path))


def run_draft(
    transcript_path: Path | str,
    output_path: Path | str,
    config: PipelineConfig,
    *,
    backend: GenerativeBackend | None = None,
    title: str = "",
    url: str = "",
) -> Document:
    """Draft a note from a transcript file and write it."""
    from vidnotes.drafting.module import draft_note
    from vidnotes.ingestion.loader import load_segments

    started = time.monotonic()
    log(f"[bold]vidnotes[/bold] draft — {Path(transcript_path).name}")

    segments = load_segments(transcript_path)
    registry = load_registry(config)
    document = draft_note(
        segments, config, _backend(config, backend), registry, title=title, url=url
    )
    write_atomic(output_path, document.render())

    show_run_summary(
        "Draft complete",
        time.monotonic() - started,
        {
            "Note": str(output_path),
            "Model": f"{config.budget.provider}/{config.budget.model}",
            "Segments": len(segments),
        },
    )
    return document


def run_link(
    note_path: Path | str,
    config: PipelineConfig,
    *,
    backend: GenerativeBackend | None = None,
    dry_run: bool = False,
    cancel: threading.Event | None = None,
) -> LinkingOutcome:
    """Link a note in place. The file is written only when linking succeeds."""
    from vidnotes.linking.module import LinkingModule

    started = time.monotonic()
    note_path = Path(note_path)
    log(f"[bold]vidnotes[/bold] link — {note_path.name}")

    document = read_note(note_path)
    module = LinkingModule(config, _backend(config, backend), load_registry(config))

    errors = module.validate_inputs(document)
    if errors:
        for err in errors:
            log_error(f"  - {err}")
        raise LinkingFailed(f"Cannot link {note_path.name}: {errors[0]}")

    outcome = module.run(document, cancel=cancel)

    if dry_run:
        log_step("Link", "Dry run: note not written")
    else:
        write_atomic(note_path, outcome.document.render())

    report = outcome.report
    show_run_summary(
        "Linking complete",
        time.monotonic() - started,
        {
            "Note": str(note_path),
            "Sections": report.sections,
            "Linked": report.sections_linked,
            "Links added": report.links_added,
            "Chunks": f"{report.chunks_accepted}/{report.chunks_sent} accepted",
        },
    )
    return outcome


def run_translate(
    note_path: Path | str,
    config: PipelineConfig,
    language: str,
    *,
    output_path: Path | str | None = None,
    backend: GenerativeBackend | None = None,
) -> Document:
    """Translate a note's body, writing to ``output_path`` or in place."""
    from vidnotes.linking.translate import translate_body

    started = time.monotonic()
    note_path = Path(note_path)
    log(f"[bold]vidnotes[/bold] translate — {note_path.name} → {language}")

    document = read_note(note_path)
    registry = load_registry(config)
    translated = translate_body(
        document, config, _backend(config, backend), registry, language
    )
    target = Path(output_path) if output_path else note_path
    write_atomic(target, translated.render())

    show_run_summary(
        "Translation complete",
        time.monotonic() - started,
        {"Note": str(target), "Language": language},
    )
    return translated
