"""Common interface for the word and formatted typing engines."""

import copy
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Sequence, Union

from core.metrics import calculate_accuracy
from core.models import Phase, TypingProgress
from utils.keys import KeyEvent, KeyKind

RECENT_KEYS_LIMIT = 20

TargetText = Union[Sequence[str], str]


@dataclass
class SessionState:
    """Mutable state of one typing session.

    Engines never change a state in place: every transition works on a copy
    and returns it.
    """

    cursor: int = field(default=0)
    correct_chars: int = field(default=0)
    total_chars: int = field(default=0)
    elapsed_seconds: int = field(default=0)
    phase: Phase = field(default=Phase.PENDING)
    accuracy: int = field(default=100)
    wpm: int = field(default=0)
    recent_keys: Deque[str] = field(
        default_factory=lambda: deque(maxlen=RECENT_KEYS_LIMIT)
    )

    def copy(self) -> "SessionState":
        """Return a copy that shares no mutable container with this state.

        Subclasses holding lists copy them in an override.
        """
        new_state = copy.copy(self)
        new_state.recent_keys = deque(self.recent_keys, maxlen=self.recent_keys.maxlen)
        return new_state

    def log_key(self, label: str) -> None:
        """Append a key to the recent keys display log."""
        self.recent_keys.append(label)


class TypingEngine(ABC):
    """Matching strategy for one kind of target text."""

    formatted = False

    def __init__(self, target: TargetText):
        self._target = target

    @property
    def target(self) -> TargetText:
        """Target text, read-only."""
        return self._target

    @abstractmethod
    def new_state(self, recent_keys_limit: int = RECENT_KEYS_LIMIT) -> SessionState:
        """Create the initial state for this engine's target."""

    def apply_key(self, state: SessionState, event: KeyEvent) -> SessionState:
        """Apply one key press and return the resulting state.

        Keys are ignored unless the session is playing.
        """
        if state.phase != Phase.PLAYING:
            return state
        if event.kind == KeyKind.BACKSPACE:
            return self.apply_backspace(state)

        new_state = state.copy()
        self._insert(new_state, event)
        new_state.accuracy = calculate_accuracy(
            new_state.correct_chars, new_state.total_chars
        )
        return new_state

    def apply_backspace(self, state: SessionState) -> SessionState:
        """Undo the last keystroke and return the resulting state."""
        if state.phase != Phase.PLAYING:
            return state

        new_state = state.copy()
        self._backspace(new_state)
        new_state.accuracy = calculate_accuracy(
            new_state.correct_chars, new_state.total_chars
        )
        return new_state

    def current_metrics(self, state: SessionState) -> tuple[int, int, int]:
        """Return (correct_chars, total_chars, accuracy) for a state."""
        return (
            state.correct_chars,
            state.total_chars,
            calculate_accuracy(state.correct_chars, state.total_chars),
        )

    @abstractmethod
    def progress(self, state: SessionState) -> TypingProgress:
        """Calculate progress of a state against the target."""

    @abstractmethod
    def user_input(self, state: SessionState) -> Union[list[str], str]:
        """Return a copy of the typed input held by a state."""

    @abstractmethod
    def _insert(self, state: SessionState, event: KeyEvent) -> None:
        """Apply a non-backspace key to a state copy."""

    @abstractmethod
    def _backspace(self, state: SessionState) -> None:
        """Apply a backspace to a state copy."""
