"""Heading-bounded document chunking."""

from __future__ import annotations

import math
import re

from vidnotes.models.document import Chunk

_HEADING_LINE_RE = re.compile(r"^#{1,6}[ \t]+\S")


def is_heading_line(line: str) -> bool:
    return bool(_HEADING_LINE_RE.match(line))


def find_headings(text: str) -> list[str]:
    """Return every heading line (without its line ending), in order."""
    return [
        line.rstrip("\r\n")
        for line in text.splitlines(keepends=True)
        if is_heading_line(line)
    ]


def heading_count(text: str) -> int:
    return len(find_headings(text))


def has_heading(text: str) -> bool:
    return any(is_heading_line(line) for line in text.splitlines())


def _sections(body: str) -> tuple[str, list[str]]:
    """Split a body into its preamble and heading-led sections."""
    preamble: list[str] = []
    sections: list[list[str]] = []
    for line in body.splitlines(keepends=True):
        if is_heading_line(line):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
        else:
            preamble.append(line)
    return "".join(preamble), ["".join(s) for s in sections]


def chunk_document(body: str, budget_tokens: int) -> list[Chunk]:
    """Split ``body`` into heading-bounded chunks of roughly ``budget_tokens``.

    Text before the first heading becomes its own chunk. Sections are packed
    greedily; a chunk is closed at a heading boundary once the next section
    would push it past the budget. A single oversized section stays whole.
    Concatenating the chunk texts reproduces ``body`` exactly.
    """
    budget_tokens = max(1, budget_tokens)
    preamble, sections = _sections(body)

    texts: list[tuple[str, bool]] = []
    if preamble:
        texts.append((preamble, False))

    current = ""
    for section in sections:
        candidate = current + section
        if current and math.ceil(len(candidate) / 4) > budget_tokens:
            texts.append((current, True))
            current = section
        else:
            current = candidate
    if current:
        texts.append((current, True))

    return [
        Chunk(index=i, text=text, has_heading=heading)
        for i, (text, heading) in enumerate(t for t in texts if t[0])
    ]
