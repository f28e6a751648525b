"""Prompt assembly for the drafting, linking and translation passes."""

from __future__ import annotations

from vidnotes.models.config import DraftingConfig, LinkingConfig, TranslationConfig


def truncate_transcript(transcript: str, limit: int) -> str:
    """Cut the transcript to ``limit`` characters, ending on a full line."""
    if len(transcript) <= limit:
        return transcript
    cut = transcript[:limit]
    newline = cut.rfind("\n")
    if newline > 0:
        cut = cut[:newline]
    return cut


def wrap_reference(text: str, config: LinkingConfig) -> str:
    return f"{config.reference_delimiter}\n{text}\n{config.reference_end_delimiter}"


def linking_prompts(
    config: LinkingConfig,
    video_id: str,
    transcript: str,
    note_text: str,
) -> tuple[str, str]:
    """Build (system, user) prompts for one linking call."""
    instructions = config.user_prompt.replace("VIDEO_ID", video_id)
    user_prompt = (
        "INSTRUCTIONS:\n" + instructions + "\n\n"
        "INSTRUCTION INPUT DATA - TIMESTAMPS TRANSCRIPT:\n"
        + wrap_reference(transcript, config) + "\n\n"
        "INPUT NOTE TO BE MODIFIED WITH TIMESTAMPS:\n" + note_text
    )
    return config.system_prompt, user_prompt


def drafting_prompts(config: DraftingConfig, transcript: str) -> tuple[str, str]:
    user_prompt = (
        "INSTRUCTIONS:\n" + config.user_prompt + "\n\n"
        "TRANSCRIPT:\n" + transcript
    )
    return config.system_prompt, user_prompt


def translation_prompts(
    config: TranslationConfig,
    language: str,
    text: str,
) -> tuple[str, str]:
    instructions = config.user_prompt.replace("LANGUAGE", language)
    user_prompt = (
        "INSTRUCTIONS:\n" + instructions + "\n\n"
        "CONTENT TO TRANSLATE:\n" + text
    )
    return config.system_prompt, user_prompt
