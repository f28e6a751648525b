"""Tests for output validation."""

from __future__ import annotations

from vidnotes.linking.validator import has_timestamp_reference, validate_output

VID = "dQw4w9WgXcQ"
ORIGINAL = (
    "## 1. First\nAlpha text here.\n\n"
    "## 2. Second\nBeta text here.\n\n"
    "## 3. Third\nGamma text here.\n"
)


def linked(text: str, video_id: str = VID) -> str:
    link = f" [Watch](https://www.youtube.com/watch?v={video_id}&t=60)"
    return "\n".join(
        line + link if line.startswith("## ") else line for line in text.split("\n")
    )


class TestValidateOutput:
    def test_accepts_linked_output(self) -> None:
        result = validate_output(linked(ORIGINAL), ORIGINAL, video_id=VID)
        assert result.accepted
        assert result.reason is None

    def test_accepts_markers(self) -> None:
        candidate = ORIGINAL.replace("## 1. First", "## 1. First [TimeIndex:60]")
        assert validate_output(candidate, ORIGINAL, video_id=VID).accepted

    def test_rejects_empty(self) -> None:
        result = validate_output("  \n", ORIGINAL, video_id=VID)
        assert not result.accepted
        assert result.reason == "empty output"

    def test_rejects_dropped_heading(self) -> None:
        candidate = linked(ORIGINAL).replace("## 3. Third", "Third")
        result = validate_output(candidate, ORIGINAL, video_id=VID)
        assert not result.accepted
        assert "heading count" in result.reason

    def test_rejects_renamed_heading(self) -> None:
        candidate = linked(ORIGINAL).replace("## 2. Second", "## 2. Renamed")
        result = validate_output(candidate, ORIGINAL, video_id=VID)
        assert not result.accepted
        assert "heading lost" in result.reason

    def test_rejects_missing_links(self) -> None:
        result = validate_output(ORIGINAL + "\n", ORIGINAL, video_id=VID)
        assert not result.accepted
        assert result.reason == "no timestamp links"

    def test_rejects_link_for_other_video(self) -> None:
        result = validate_output(linked(ORIGINAL, "otherVideo1"), ORIGINAL, video_id=VID)
        assert not result.accepted

    def test_links_optional(self) -> None:
        assert validate_output(ORIGINAL, ORIGINAL, video_id=VID, require_links=False).accepted

    def test_rejects_reference_echo(self) -> None:
        candidate = linked(ORIGINAL) + "\n----- REFERENCE MATERIAL -----\n[00:00:00] x\n"
        result = validate_output(candidate, ORIGINAL, video_id=VID)
        assert not result.accepted
        assert "reference" in result.reason

    def test_rejects_truncated_output(self) -> None:
        long_original = ORIGINAL + "Extra paragraph. " * 50
        result = validate_output(linked(ORIGINAL), long_original, video_id=VID)
        assert not result.accepted
        assert "truncated" in result.reason

    def test_expected_headings_override(self) -> None:
        result = validate_output(
            linked(ORIGINAL), ORIGINAL, video_id=VID, expected_headings=["## 4. Fourth"],
        )
        assert not result.accepted


class TestTimestampReference:
    def test_escaped_marker(self) -> None:
        assert has_timestamp_reference("## 1. x [TimeIndex\\:5]", "")

    def test_malformed_link(self) -> None:
        assert not has_timestamp_reference(f"## 1. x [Watch](https://youtu.be/{VID}?t=5)", VID)

    def test_body_markers_ignored(self) -> None:
        text = "## 1. First\n[00:01:00] [TimeIndex:60] echoed transcript line\n"
        assert not has_timestamp_reference(text, VID)

    def test_body_link_ignored(self) -> None:
        text = f"## 1. First\nSee [Watch](https://www.youtube.com/watch?v={VID}&t=60)\n"
        assert not has_timestamp_reference(text, VID)


class TestEchoedTranscript:
    def test_rejects_transcript_lines_in_body(self) -> None:
        candidate = ORIGINAL + "[00:01:00] [TimeIndex:60] Alpha text here.\n"
        result = validate_output(candidate, ORIGINAL, video_id=VID)
        assert not result.accepted
        assert result.reason == "no timestamp links"
