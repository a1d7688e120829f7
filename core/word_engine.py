"""Word-mode engine: matching over a sequence of whole words."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Sequence

from core.engine import RECENT_KEYS_LIMIT, SessionState, TypingEngine
from core.metrics import calculate_progress
from core.models import Phase, TypingProgress
from utils.keys import KeyEvent

log = logging.getLogger("typeninja.word_engine")


@dataclass
class WordSessionState(SessionState):
    """Session state with one typed string per target word."""

    user_input: List[str] = field(default_factory=list)

    def copy(self) -> "WordSessionState":
        new_state = super().copy()
        new_state.user_input = list(self.user_input)
        return new_state


class WordEngine(TypingEngine):
    """Advances word by word on space.

    Any other key, Enter and Tab included, is typed into the current word.
    """

    def __init__(self, words: Sequence[str]):
        super().__init__(tuple(words))

    def new_state(self, recent_keys_limit: int = RECENT_KEYS_LIMIT) -> WordSessionState:
        return WordSessionState(
            user_input=["" for _ in self.target],
            recent_keys=deque(maxlen=recent_keys_limit),
        )

    def _is_last_word(self, state: WordSessionState) -> bool:
        return state.cursor >= len(self.target) - 1

    def _insert(self, state: WordSessionState, event: KeyEvent) -> None:
        if not self.target:
            state.phase = Phase.FINISHED
            return

        if event.char == " ":
            self._advance_word(state)
            return

        word = self.target[state.cursor]
        typed = state.user_input[state.cursor] + event.char
        state.user_input[state.cursor] = typed
        state.total_chars += 1

        position = len(typed) - 1
        if position < len(word) and word[position] == event.char:
            state.correct_chars += 1

        # A last word of the right length finishes even if it is misspelled.
        if self._is_last_word(state) and len(typed) == len(word):
            log.debug("Last word typed to length, finishing")
            state.phase = Phase.FINISHED

    def _advance_word(self, state: WordSessionState) -> None:
        if self._is_last_word(state):
            state.phase = Phase.FINISHED
        else:
            state.cursor += 1

    def _backspace(self, state: WordSessionState) -> None:
        if not self.target:
            return

        typed = state.user_input[state.cursor]
        if typed:
            word = self.target[state.cursor]
            position = len(typed) - 1
            removed = typed[-1]
            state.user_input[state.cursor] = typed[:-1]
            state.total_chars -= 1
            if position < len(word) and word[position] == removed:
                state.correct_chars -= 1
        elif state.cursor > 0:
            state.cursor -= 1

    def progress(self, state: WordSessionState) -> TypingProgress:
        return calculate_progress(self.target, state.user_input, state.cursor)

    def user_input(self, state: WordSessionState) -> List[str]:
        return list(state.user_input)
