"""Structural validation of generated output before it is accepted."""

from __future__ import annotations

import re

from vidnotes.linking.chunker import find_headings
from vidnotes.models.document import ValidationResult

MARKER_TOKEN_RE = re.compile(r"\[TimeIndex\\?:\d+\]")


def watch_link_re(video_id: str) -> re.Pattern[str]:
    return re.compile(
        r"\[Watch\]\(https://www\.youtube\.com/watch\?v="
        + re.escape(video_id)
        + r"&t=\d+\)"
    )


def has_timestamp_reference(text: str, video_id: str) -> bool:
    """True when a heading line holds a link for ``video_id`` or a marker.

    References in body text do not count, so transcript lines echoed into
    the output cannot satisfy the check.
    """
    link_re = watch_link_re(video_id) if video_id else None
    for heading in find_headings(text):
        if link_re is not None and link_re.search(heading):
            return True
        if MARKER_TOKEN_RE.search(heading):
            return True
    return False


def _missing_heading(candidate_headings: list[str], expected: list[str]) -> str | None:
    remaining = [h.strip() for h in candidate_headings]
    for heading in expected:
        wanted = heading.strip()
        for i, line in enumerate(remaining):
            if line.startswith(wanted):
                del remaining[i]
                break
        else:
            return wanted
    return None


def validate_output(
    candidate: str,
    original: str,
    *,
    expected_headings: list[str] | None = None,
    video_id: str = "",
    require_links: bool = True,
    reference_delimiter: str = "----- REFERENCE MATERIAL -----",
    min_length_ratio: float = 0.9,
) -> ValidationResult:
    """Check a candidate against the original chunk.

    The candidate must be non-empty, keep every heading, carry at least one
    timestamp reference when ``require_links`` is set, not echo the reference
    material, and not be visibly truncated.
    """
    if not candidate.strip():
        return ValidationResult.reject("empty output")

    if expected_headings is None:
        expected_headings = find_headings(original)
    candidate_headings = find_headings(candidate)
    if len(candidate_headings) < len(find_headings(original)):
        return ValidationResult.reject(
            f"heading count dropped ({len(candidate_headings)} < "
            f"{len(find_headings(original))})"
        )
    missing = _missing_heading(candidate_headings, expected_headings)
    if missing is not None:
        return ValidationResult.reject(f"heading lost: {missing!r}")

    if require_links and not has_timestamp_reference(candidate, video_id):
        return ValidationResult.reject("no timestamp links")

    if reference_delimiter and reference_delimiter in candidate:
        return ValidationResult.reject("reference material echoed")

    if len(candidate) < len(original) * min_length_ratio:
        return ValidationResult.reject(
            f"output truncated ({len(candidate)} < {min_length_ratio:.0%} of "
            f"{len(original)} chars)"
        )

    return ValidationResult.ok()
