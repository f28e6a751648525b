"""Shared fixtures: a scripted backend and note builders."""

from __future__ import annotations

import re
from typing import Callable

import pytest

from vidnotes.drafting.module import build_metadata_block
from vidnotes.ingestion.bucketer import format_annotated_transcript
from vidnotes.models.transcript import TranscriptSegment

VIDEO_ID = "dQw4w9WgXcQ"
NOTE_MARKER = "INPUT NOTE TO BE MODIFIED WITH TIMESTAMPS:\n"

_HEADING = re.compile(r"^#{1,6}[ \t]+\S")


class FakeBackend:
    """Backend double that replays scripted responses or delegates to a handler.

    Scripted items that are exceptions are raised instead of returned.
    """

    def __init__(
        self,
        responses: list | None = None,
        handler: Callable[[str, int], str] | None = None,
    ):
        self.responses = list(responses or [])
        self.handler = handler
        self.calls: list[dict] = []

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
        provider: str,
    ) -> str:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
            "provider": provider,
        })
        if self.handler is not None:
            return self.handler(user_prompt, max_output_tokens)
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


def note_from_prompt(user_prompt: str) -> str:
    return user_prompt.split(NOTE_MARKER, 1)[1]


def add_markers(text: str, seconds: int = 60) -> str:
    """Append a time marker to every heading line, keeping line endings."""
    out = []
    for line in text.splitlines(keepends=True):
        if _HEADING.match(line):
            stripped = line.rstrip("\r\n")
            out.append(f"{stripped} [TimeIndex:{seconds}]" + line[len(stripped):])
        else:
            out.append(line)
    return "".join(out)


def linking_handler(user_prompt: str, max_output_tokens: int) -> str:
    return add_markers(note_from_prompt(user_prompt))


def make_segments() -> list[TranscriptSegment]:
    return [
        TranscriptSegment(start_seconds=0, text="Welcome to the show."),
        TranscriptSegment(start_seconds=30, text="Today: habits and focus."),
        TranscriptSegment(start_seconds=65, text="First, why habits matter."),
        TranscriptSegment(start_seconds=130, text="Second, deep work sessions."),
        TranscriptSegment(start_seconds=200, text="Finally, book recommendations."),
    ]


def make_body(headings: int, paragraph: str = "Some detailed explanation of the topic.") -> str:
    parts = ["\nA short overview of the video.\n\n"]
    for i in range(1, headings + 1):
        parts.append(f"## {i}. Topic number {i}\n{paragraph} Section {i}.\n\n")
    return "".join(parts)


def make_note(headings: int, *, video_id: str = VIDEO_ID, **body_kwargs) -> str:
    metadata = build_metadata_block(
        title="Habits and Focus",
        url=f"https://www.youtube.com/watch?v={video_id}",
        video_id=video_id,
        transcript=format_annotated_transcript(make_segments()),
    )
    return metadata + make_body(headings, **body_kwargs)


@pytest.fixture
def segments() -> list[TranscriptSegment]:
    return make_segments()


@pytest.fixture
def linking_backend() -> FakeBackend:
    return FakeBackend(handler=linking_handler)
