"""Time bucketing — canonical annotated transcript with inline time markers."""

from __future__ import annotations

import math
import re

from vidnotes.models.transcript import TimeBucket, TranscriptSegment
from vidnotes.utils.progress import log_debug

MIN_BUCKET_SECONDS = 60
UNFORMATTABLE_TRANSCRIPT = "Unable to format transcript properly"

MARKER_RE = re.compile(r"\[TimeIndex\\?:(\d+)\]")
_LINE_RE = re.compile(
    r"^\s*\[(\d{2,}):(\d{2}):(\d{2})\]\s+\[TimeIndex\\?:(\d+)\][ \t]?(.*)$"
)
_SPACES_RE = re.compile(r"\s+")


def format_timestamp(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def marker(seconds: int) -> str:
    return f"[TimeIndex:{seconds}]"


def _round_seconds(value: float) -> int:
    return int(math.floor(value + 0.5))


def bucket_segments(
    segments: list[TranscriptSegment],
    min_duration: float = MIN_BUCKET_SECONDS,
) -> list[TimeBucket]:
    """Group segments into buckets spanning at least ``min_duration`` seconds.

    Segments are stably sorted by start time and blank segments are skipped.
    A segment opens a new bucket once it starts ``min_duration`` or more after
    the start of the current one; otherwise its text is appended to it.
    """
    ordered = sorted(segments, key=lambda s: s.start_seconds)

    buckets: list[TimeBucket] = []
    current_start: float | None = None
    current_text: list[str] = []

    for seg in ordered:
        text = seg.text.strip()
        if not text:
            continue

        if current_start is None:
            current_start = seg.start_seconds
            current_text = [text]
        elif seg.start_seconds - current_start >= min_duration:
            buckets.append(
                TimeBucket(
                    start_seconds=_round_seconds(current_start),
                    text=" ".join(current_text),
                )
            )
            current_start = seg.start_seconds
            current_text = [text]
        else:
            current_text.append(text)

    if current_start is not None:
        buckets.append(
            TimeBucket(
                start_seconds=_round_seconds(current_start),
                text=" ".join(current_text),
            )
        )

    log_debug("Bucket", f"{len(ordered)} segments -> {len(buckets)} buckets")
    return buckets


def format_bucket_line(bucket: TimeBucket) -> str:
    """Serialize one bucket as ``[HH:MM:SS] [TimeIndex:N] text``.

    Colons in the text are escaped. Markers already present in the text are
    moved to the end of the line; a copy of the bucket's own marker is dropped.
    """
    relocated: list[int] = []
    for match in MARKER_RE.finditer(bucket.text):
        seconds = int(match.group(1))
        if seconds != bucket.start_seconds and seconds not in relocated:
            relocated.append(seconds)

    text = MARKER_RE.sub(" ", bucket.text)
    text = _SPACES_RE.sub(" ", text).strip()
    text = text.replace(":", "\\:")

    parts = [f"[{format_timestamp(bucket.start_seconds)}]", bucket.marker]
    if text:
        parts.append(text)
    parts.extend(marker(s) for s in relocated)
    return " ".join(parts)


def format_annotated_transcript(
    segments: list[TranscriptSegment],
    min_duration: float = MIN_BUCKET_SECONDS,
) -> str:
    """Build the canonical annotated transcript, one bucket per line."""
    buckets = bucket_segments(segments, min_duration=min_duration)
    if not buckets:
        return UNFORMATTABLE_TRANSCRIPT
    return "\n".join(format_bucket_line(b) for b in buckets)


def parse_annotated_transcript(text: str) -> list[TranscriptSegment]:
    """Parse an annotated transcript back into one segment per line.

    Lines that do not carry a leading timestamp and marker are ignored.
    """
    segments: list[TranscriptSegment] = []
    if text.strip() == UNFORMATTABLE_TRANSCRIPT:
        return segments

    for line in text.splitlines():
        match = _LINE_RE.match(line)
        if not match:
            continue
        body = match.group(5).replace("\\:", ":")
        body = MARKER_RE.sub(lambda m: marker(int(m.group(1))), body)
        segments.append(
            TranscriptSegment(start_seconds=int(match.group(4)), text=body.strip())
        )
    return segments


def transcript_markers(text: str) -> list[int]:
    """Return every marker value in an annotated transcript, in order."""
    return [int(m.group(1)) for m in MARKER_RE.finditer(text)]
