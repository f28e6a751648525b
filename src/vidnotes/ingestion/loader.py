"""Transcript loading — JSON / JSONL files into TranscriptSegments."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from vidnotes.errors import TranscriptError
from vidnotes.models.transcript import TranscriptSegment
from vidnotes.utils.io import read_text
from vidnotes.utils.progress import log_step


def load_segments(path: Path | str) -> list[TranscriptSegment]:
    """Load transcript segments from a JSON, JSONL or timedtext-style file."""
    path = Path(path)
    if not path.exists():
        raise TranscriptError(f"Transcript not found: {path}")

    raw = read_text(path)
    try:
        entries = _parse_entries(raw)
    except json.JSONDecodeError as e:
        raise TranscriptError(f"Transcript is not valid JSON: {path} ({e})") from e

    segments = segments_from_entries(entries)
    log_step("Transcript", f"Loaded {len(segments)} segments from {path.name}")
    return segments


def _parse_entries(raw: str) -> list[dict[str, Any]]:
    stripped = raw.strip()
    if not stripped:
        return []

    if stripped[0] in "[{":
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            # Not a single document; fall through to JSONL.
            data = None
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in ("segments", "events", "transcript"):
                if isinstance(data.get(key), list):
                    return data[key]
            return [data]

    return [json.loads(line) for line in stripped.splitlines() if line.strip()]


def segments_from_entries(entries: list[dict[str, Any]]) -> list[TranscriptSegment]:
    """Convert loosely shaped transcript entries into segments.

    Accepts ``start`` (seconds) or ``tStartMs`` (milliseconds) for timing and
    ``text`` or ``segs[].utf8`` for content. Entries without text are dropped.
    """
    segments: list[TranscriptSegment] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        text = _entry_text(entry)
        if not text:
            continue
        segments.append(
            TranscriptSegment(start_seconds=_entry_start(entry), text=text)
        )
    return segments


def _entry_start(entry: dict[str, Any]) -> float:
    start = entry.get("start")
    if isinstance(start, (int, float)):
        return max(0.0, float(start))
    if isinstance(start, str):
        try:
            return max(0.0, float(start))
        except ValueError:
            pass

    ms = entry.get("tStartMs")
    if ms is not None:
        try:
            return max(0.0, int(ms) / 1000)
        except (TypeError, ValueError):
            pass
    return 0.0


def _entry_text(entry: dict[str, Any]) -> str:
    text = entry.get("text")
    if isinstance(text, str):
        return text.strip()
    segs = entry.get("segs")
    if isinstance(segs, list):
        return "".join(
            s.get("utf8", "") for s in segs if isinstance(s, dict)
        ).strip()
    return ""
