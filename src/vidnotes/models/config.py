"""Configuration models for each pipeline pass."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from vidnotes.utils.io import read_yaml

DEFAULT_SUMMARY_SYSTEM_PROMPT = (
    "You are an expert note taker. You turn video transcripts into structured, "
    "faithful knowledge notes written in Markdown."
)

DEFAULT_SUMMARY_USER_PROMPT = """Summarize the transcript below into a structured note.

- Start with a short paragraph summarizing the main themes. Do not label it.
- Organize the rest into numbered sections using Markdown headings, e.g. "## 1. Topic" and "### 1.1. Sub Topic".
- Under each heading, explain the ideas, terms and arguments in detail, drawn only from the transcript.
- End with a conclusion section listing any books, people or resources mentioned."""

DEFAULT_LINKING_SYSTEM_PROMPT = (
    "You are a highly precise assistant that amends YouTube links to add "
    "timestamps to section headings in a note. You never include any reference "
    "material (like video IDs or transcripts) in your output."
)

DEFAULT_LINKING_USER_PROMPT = """TASK: Add YouTube timestamp links to each section heading in this document.

RULES:
1. NEVER summarize or modify the content
2. NEVER remove any content
3. ALWAYS return the FULL original content PLUS timestamp links at the end of section headings
4. If processing multiple sections, add timestamps to ALL headings
5. ONLY process markdown numbered headings, e.g. "## 1. Topic" or "### 1.1. Sub Topic"
6. DO NOT process headings without numbers
7. Do NOT add a preamble, postamble, headers or titles
8. Respond only with the raw answer, no intro or outro text
9. NEVER include any reference material marked by ----- REFERENCE MATERIAL ----- blocks in your response

HOW TO DO THIS:
1. Identify ALL numbered section headings in the document
2. The transcript has lines in the format: [HH:MM:SS] [TimeIndex:X] where X is the exact seconds value
3. For each heading, read the content of its section to understand its main topic
4. Find where in the transcript this topic is BEST SUBSTANTIVELY DISCUSSED
5. Use the TimeIndex value of that transcript line directly; only use values that appear in the transcript
6. Add the link in the format: [Watch](https://www.youtube.com/watch?v=VIDEO_ID&t=TimeIndex)
7. Place the link at the end of the heading line, after the heading text"""

DEFAULT_TRANSLATION_SYSTEM_PROMPT = (
    "You are a highly accurate translator who preserves all formatting, links, "
    "and structure when translating content."
)

DEFAULT_TRANSLATION_USER_PROMPT = """TRANSLATION TASK: Translate the following content into LANGUAGE.

RULES:
1. Preserve all Markdown formatting, especially section headings with # syntax
2. Keep all links intact, especially YouTube timestamp [Watch] links
3. Maintain the same overall structure and organization
4. Translate everything else, including headings, paragraphs, and lists
5. Keep technical terms and proper names in their original form when appropriate
6. Respond only with the translated content"""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BudgetConfig(_Frozen):
    """Token budget inputs for every pass."""

    provider: str = "anthropic"
    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = Field(default=4096, gt=0)  # user-configured ceiling
    constrained: bool = False  # constrained device class
    overrides_path: str | None = None
    linking_multiplier: float = Field(default=0.85, gt=0.0, le=1.0)
    constrained_cap_tokens: int = Field(default=2000, gt=0)


class DraftingConfig(_Frozen):
    """Configuration for the first (summarization) pass."""

    system_prompt: str = DEFAULT_SUMMARY_SYSTEM_PROMPT
    user_prompt: str = DEFAULT_SUMMARY_USER_PROMPT
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    bucket_seconds: int = Field(default=60, ge=1, le=3600)


class LinkingConfig(_Frozen):
    """Configuration for the timestamp-linking pass."""

    system_prompt: str = DEFAULT_LINKING_SYSTEM_PROMPT
    user_prompt: str = DEFAULT_LINKING_USER_PROMPT
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    chunk_threshold: int = Field(default=5, ge=0)  # chunk above this many headings
    chunk_fill_ratio: float = Field(default=0.7, gt=0.0, le=1.0)
    retry_factor: float = Field(default=0.5, gt=0.0, lt=1.0)
    transcript_char_limit: int = Field(default=10000, ge=500)
    constrained_transcript_char_limit: int = Field(default=5000, ge=500)
    min_length_ratio: float = Field(default=0.9, ge=0.0, le=1.0)
    reference_delimiter: str = "----- REFERENCE MATERIAL -----"
    reference_end_delimiter: str = "----- END REFERENCE MATERIAL -----"


class TranslationConfig(_Frozen):
    """Configuration for the optional translation pass."""

    system_prompt: str = DEFAULT_TRANSLATION_SYSTEM_PROMPT
    user_prompt: str = DEFAULT_TRANSLATION_USER_PROMPT
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)


class PipelineConfig(_Frozen):
    """Immutable configuration for one pipeline run."""

    video_id: str = ""
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    drafting: DraftingConfig = Field(default_factory=DraftingConfig)
    linking: LinkingConfig = Field(default_factory=LinkingConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> PipelineConfig:
        return cls(**read_yaml(path))

    def with_overrides(self, **budget_overrides) -> PipelineConfig:
        """Return a copy with non-None budget fields replaced."""
        updates = {k: v for k, v in budget_overrides.items() if v is not None}
        if not updates:
            return self
        budget = BudgetConfig(**{**self.budget.model_dump(), **updates})
        return self.model_copy(update={"budget": budget})

    def with_video_id(self, video_id: str | None) -> PipelineConfig:
        if not video_id:
            return self
        return self.model_copy(update={"video_id": video_id})
