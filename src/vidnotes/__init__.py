"""vidnotes — turn video transcripts into linked knowledge notes."""

__version__ = "0.1.0"
