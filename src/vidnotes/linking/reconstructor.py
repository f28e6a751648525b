"""Document reconstruction — frontmatter handling and marker-to-link rewriting."""

from __future__ import annotations

import re

from ruamel.yaml.error import YAMLError

from vidnotes.ingestion.bucketer import MARKER_RE
from vidnotes.linking.chunker import find_headings
from vidnotes.models.document import Document
from vidnotes.utils.io import load_yaml_string

WATCH_URL = "https://www.youtube.com/watch?v={video_id}&t={seconds}"
WATCH_LINK = "[Watch](" + WATCH_URL + ")"

LINK_RE = re.compile(
    r"\[Watch\]\(https://www\.youtube\.com/watch\?v=([A-Za-z0-9_-]+)&t=(\d+)\)"
)
_DELIMITER_RE = re.compile(r"^---[ \t]*(\r?\n|$)")


def watch_link(video_id: str, seconds: int) -> str:
    return WATCH_LINK.format(video_id=video_id, seconds=seconds)


def split_document(text: str) -> Document:
    """Separate YAML frontmatter from the body.

    The metadata block runs from a leading ``---`` line through the next
    ``---`` line, line ending included. Without a closing delimiter the whole
    text is treated as body.
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _DELIMITER_RE.match(lines[0]):
        return Document(metadata_block="", body=text)

    for i in range(1, len(lines)):
        if _DELIMITER_RE.match(lines[i]):
            metadata = "".join(lines[: i + 1])
            return Document(metadata_block=metadata, body=text[len(metadata):])
    return Document(metadata_block="", body=text)


def frontmatter(metadata_block: str) -> dict:
    """Parse the YAML mapping between the frontmatter delimiters.

    A block that is not a YAML mapping, such as a paragraph between two
    horizontal rules, yields an empty mapping.
    """
    lines = metadata_block.splitlines(keepends=True)
    if len(lines) < 2:
        return {}
    try:
        loaded = load_yaml_string("".join(lines[1:-1]))
    except YAMLError:
        return {}
    if not isinstance(loaded, dict):
        return {}
    return dict(loaded)


def extract_transcript(metadata_block: str) -> str:
    """Return the annotated transcript stored in the frontmatter, or ""."""
    value = frontmatter(metadata_block).get("transcript")
    if value is None:
        return ""
    return str(value)


def markers_to_links(text: str, video_id: str) -> str:
    """Rewrite every ``[TimeIndex:N]`` marker as a watch link."""
    if not video_id:
        return text
    return MARKER_RE.sub(lambda m: watch_link(video_id, int(m.group(1))), text)


def extract_links(text: str) -> list[tuple[str, int]]:
    return [(m.group(1), int(m.group(2))) for m in LINK_RE.finditer(text)]


def count_linked_headings(text: str) -> int:
    return sum(1 for h in find_headings(text) if "[Watch](" in h)


def reconstruct(
    metadata_block: str,
    chunk_texts: list[str],
    video_id: str,
) -> Document:
    """Join processed chunks under the untouched metadata block."""
    body = markers_to_links("".join(chunk_texts), video_id)
    return Document(metadata_block=metadata_block, body=body)
