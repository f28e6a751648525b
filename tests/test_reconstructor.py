"""Tests for frontmatter handling and marker rewriting."""

from __future__ import annotations

import pytest

from conftest import VIDEO_ID, make_note

from vidnotes.ingestion.bucketer import marker
from vidnotes.linking.reconstructor import (
    count_linked_headings,
    extract_links,
    extract_transcript,
    frontmatter,
    markers_to_links,
    reconstruct,
    split_document,
    watch_link,
)


class TestSplitDocument:
    def test_frontmatter_and_body(self) -> None:
        text = "---\ntitle: x\n---\n\n## 1. A\n"
        doc = split_document(text)
        assert doc.metadata_block == "---\ntitle: x\n---\n"
        assert doc.body == "\n## 1. A\n"
        assert doc.render() == text

    def test_no_frontmatter(self) -> None:
        doc = split_document("## 1. A\ntext\n")
        assert doc.metadata_block == ""
        assert doc.body == "## 1. A\ntext\n"

    def test_unclosed_frontmatter_is_body(self) -> None:
        text = "---\ntitle: x\n## 1. A\n"
        assert split_document(text).body == text

    def test_crlf_round_trip(self) -> None:
        text = "---\r\ntitle: x\r\n---\r\nbody\r\n"
        doc = split_document(text)
        assert doc.metadata_block == "---\r\ntitle: x\r\n---\r\n"
        assert doc.render() == text

    def test_extract_transcript(self) -> None:
        doc = split_document(make_note(2))
        transcript = extract_transcript(doc.metadata_block)
        assert transcript.startswith("[00:00:00] [TimeIndex:0] Welcome to the show.")
        assert "Today\\: habits and focus." in transcript

    def test_missing_transcript(self) -> None:
        assert extract_transcript("---\ntitle: x\n---\n") == ""


class TestFrontmatter:
    def test_mapping(self) -> None:
        assert frontmatter("---\ntitle: x\nvideo_id: abc\n---\n") == {"title": "x", "video_id": "abc"}

    @pytest.mark.parametrize("inner", [
        "Just a divider paragraph\n",
        "- one\n- two\n",
        "title: [unclosed\n",
        "",
    ])
    def test_non_mapping_block_is_empty(self, inner) -> None:
        block = f"---\n{inner}---\n"
        assert frontmatter(block) == {}
        assert extract_transcript(block) == ""


class TestMarkersToLinks:
    @pytest.mark.parametrize("seconds", [0, 1, 59, 60, 3599, 3600, 7325])
    def test_marker_round_trip(self, seconds) -> None:
        text = markers_to_links(f"## 1. A {marker(seconds)}", VIDEO_ID)
        assert extract_links(text) == [(VIDEO_ID, seconds)]
        assert text == f"## 1. A {watch_link(VIDEO_ID, seconds)}"

    def test_escaped_marker_rewritten(self) -> None:
        assert extract_links(markers_to_links("x [TimeIndex\\:42]", VIDEO_ID)) == [(VIDEO_ID, 42)]

    def test_without_video_id_markers_kept(self) -> None:
        assert markers_to_links("x [TimeIndex:4]", "") == "x [TimeIndex:4]"


class TestReconstruct:
    def test_metadata_untouched(self) -> None:
        metadata = "---\ntranscript: |-\n  [00:00:00] [TimeIndex:0] hi\n---\n"
        doc = reconstruct(metadata, ["## 1. A [TimeIndex:0]\n", "## 2. B\n"], VIDEO_ID)
        assert doc.metadata_block == metadata
        assert doc.body == f"## 1. A {watch_link(VIDEO_ID, 0)}\n## 2. B\n"

    def test_count_linked_headings(self) -> None:
        body = f"## 1. A {watch_link(VIDEO_ID, 5)}\ntext {watch_link(VIDEO_ID, 6)}\n## 2. B\n"
        assert count_linked_headings(body) == 1
