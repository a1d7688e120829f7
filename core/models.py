"""Pydantic models for TypeNinja data structures."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SessionMode(str, Enum):
    """How a session is bounded."""

    WORDS = "words"
    TIME = "time"


class Phase(str, Enum):
    """Lifecycle phase of a typing session."""

    PENDING = "pending"
    PLAYING = "playing"
    FINISHED = "finished"


ProgressStatus = Literal["start", "low", "medium", "high", "complete"]


class SessionConfig(BaseModel):
    """Immutable per-session parameters."""

    mode: SessionMode = Field(
        default=SessionMode.WORDS, description="Session bound: word count or time"
    )
    target_word_count: int = Field(
        default=25, gt=0, description="Number of random words (words mode)"
    )
    target_duration_seconds: int = Field(
        default=30, gt=0, description="Session length in seconds (time mode)"
    )
    preserve_formatting: bool = Field(
        default=True,
        description="Type custom text character by character, keeping whitespace",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class PerformanceSummary(BaseModel):
    """Snapshot of a session's results taken when it finishes."""

    wpm: int = Field(..., ge=0, description="Words per minute")
    accuracy: int = Field(..., ge=0, le=100, description="Accuracy percentage")
    correct_chars: int = Field(..., ge=0, description="Correctly typed characters")
    total_chars: int = Field(..., ge=0, description="Typed characters")
    elapsed_seconds: int = Field(
        ..., ge=0, description="Elapsed (words mode) or remaining (time mode) seconds"
    )

    model_config = ConfigDict(frozen=True)


class TypingProgress(BaseModel):
    """Progress of the typed input against the target text."""

    progress_percentage: float = Field(
        default=0.0, description="Correct target characters in percent, one decimal"
    )
    words_completed: int = Field(default=0, description="Words typed fully and correctly")
    total_words: int = Field(default=0, description="Words in the target text")
    correct_chars: int = Field(default=0, description="Target characters matched")
    total_chars: int = Field(default=0, description="Characters in the target text")
    accuracy: int = Field(default=100, description="Matched over typed characters")
    status: ProgressStatus = Field(default="start", description="Styling bucket")


class SessionSnapshot(BaseModel):
    """Read-only view of a session for presentation layers."""

    phase: Phase
    mode: SessionMode
    formatted: bool = Field(..., description="Whether the formatted engine is active")
    cursor: int
    user_input: list[str] | str
    correct_chars: int
    total_chars: int
    accuracy: int
    wpm: int
    elapsed_seconds: int
    recent_keys: list[str] = Field(default_factory=list)
    progress: TypingProgress = Field(default_factory=TypingProgress)

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class PerformanceRecord(BaseModel):
    """A finished custom-practice session stored by a performance sink."""

    id: str = Field(..., description="Record identifier")
    document_id: str = Field(..., description="Document the session was typed from")
    wpm: int
    accuracy: int
    correct_chars: int
    total_chars: int
    elapsed_seconds: int
    completed_at: datetime

    model_config = ConfigDict(extra="ignore")


class DocumentPerformance(BaseModel):
    """Aggregated performance for one document."""

    document_id: str
    performances: list[PerformanceRecord] = Field(
        default_factory=list, description="Records, newest first"
    )
    best_wpm: int | None = None
    best_accuracy: int | None = None
    average_wpm: float | None = None
    average_accuracy: float | None = None

    model_config = ConfigDict(extra="ignore")
