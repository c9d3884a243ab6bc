"""
Data models for the transcription module.

``Word``, ``Utterance`` and ``TranscriptionResult`` mirror the AssemblyAI
transcript payload (times in milliseconds).  ``Chunk`` is the grouping
produced by the chunker before it becomes an SRT cue.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class JobStatus(str, Enum):
    """Possible states of a subtitle job."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class _TimedSpan(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    text: str
    start: int
    end: int

    @model_validator(mode="after")
    def check_span(self):
        if self.start > self.end:
            raise ValueError(
                f"span starts after it ends ({self.start} > {self.end}): {self.text!r}"
            )
        return self


class Word(_TimedSpan):
    """A single transcribed word."""


class Utterance(_TimedSpan):
    """A speaker-attributed segment, used when word timing is missing."""

    speaker: Optional[str] = None


class TranscriptionResult(BaseModel):
    """Completed transcript as returned by the transcription service."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    status: Optional[str] = None
    text: Optional[str] = None
    words: Optional[List[Word]] = None
    utterances: Optional[List[Utterance]] = None
    audio_duration: Optional[float] = None


@dataclass(frozen=True)
class Chunk:
    """A finalized group of words destined to become one subtitle cue."""

    text: str
    start: int
    end: int
    words: Tuple[Word, ...]

    @classmethod
    def from_words(cls, words: Sequence[Word]) -> "Chunk":
        return cls(
            text=" ".join(word.text for word in words),
            start=words[0].start,
            end=words[-1].end,
            words=tuple(words),
        )
