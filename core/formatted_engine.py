"""Formatted-mode engine: matching over a raw character stream.

Whitespace, newlines and tabs in the target are typed verbatim. A target tab
is one position that is satisfied either by one Tab press or by four spaces.
While spaces are filling a tab the cursor stays on it; every other keystroke
consumes exactly one target position, matched or not.

Every key press is recorded in a journal of steps so that backspace can undo
it exactly, including a Tab press that appended several spaces at once.
Progress is kept as running counts next to the journal, so a key costs the
same at the end of a long document as at its start.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.engine import RECENT_KEYS_LIMIT, SessionState, TypingEngine
from core.metrics import TAB_WIDTH, build_formatted_progress, word_spans
from core.models import Phase, TypingProgress
from utils.keys import KeyEvent, KeyKind

log = logging.getLogger("typeninja.formatted_engine")


@dataclass(frozen=True)
class KeystrokeStep:
    """Effect of one keystroke on the session counts."""

    appended: str
    correct: int
    advanced: bool
    tab_fill_before: int


@dataclass
class FormattedSessionState(SessionState):
    """Session state with one typed string over the whole target."""

    user_input: str = field(default="")
    tab_fill: int = field(default=0)
    journal: List[Tuple[KeystrokeStep, ...]] = field(default_factory=list)
    # One flag per target position before the cursor, True where matched
    matched: List[bool] = field(default_factory=list)
    matched_positions: int = field(default=0)
    words_completed: int = field(default=0)

    def copy(self) -> "FormattedSessionState":
        new_state = super().copy()
        new_state.journal = list(self.journal)
        new_state.matched = list(self.matched)
        return new_state


class FormattedEngine(TypingEngine):
    """Advances character by character with tab/space equivalence."""

    formatted = True

    def __init__(self, text: str):
        super().__init__(text)
        self._spans = word_spans(text)
        # Last position of each word -> first position of that word
        self._word_starts = {end - 1: start for start, end in self._spans}

    def new_state(
        self, recent_keys_limit: int = RECENT_KEYS_LIMIT
    ) -> FormattedSessionState:
        return FormattedSessionState(recent_keys=deque(maxlen=recent_keys_limit))

    def _insert(self, state: FormattedSessionState, event: KeyEvent) -> None:
        if state.cursor >= len(self.target):
            state.phase = Phase.FINISHED
            return

        if event.kind == KeyKind.TAB:
            steps = self._press_tab(state)
        else:
            steps = [self._type_char(state, event.char)]

        state.journal.append(tuple(steps))

    def _press_tab(self, state: FormattedSessionState) -> List[KeystrokeStep]:
        if self.target[state.cursor] == "\t":
            # Only the spaces still missing from a partly filled tab are
            # appended and counted, so a target tab always types as four
            # spaces, not four plus the ones already typed.
            width = TAB_WIDTH - state.tab_fill
            step = KeystrokeStep(
                appended=" " * width,
                correct=width,
                advanced=True,
                tab_fill_before=state.tab_fill,
            )
            self._apply(state, step)
            return [step]

        steps = []
        for _ in range(TAB_WIDTH):
            if state.phase == Phase.FINISHED:
                break
            steps.append(self._type_char(state, " "))
        return steps

    def _type_char(self, state: FormattedSessionState, char: str) -> KeystrokeStep:
        expected = self.target[state.cursor]

        if char == expected:
            step = KeystrokeStep(char, 1, True, state.tab_fill)
        elif expected == "\t" and char == " ":
            step = KeystrokeStep(
                char, 1, state.tab_fill + 1 >= TAB_WIDTH, state.tab_fill
            )
        else:
            step = KeystrokeStep(char, 0, True, state.tab_fill)

        self._apply(state, step)
        return step

    def _completes_word(self, state: FormattedSessionState, position: int) -> bool:
        """Check whether position ends a word whose positions all matched."""
        start = self._word_starts.get(position)
        return start is not None and all(state.matched[start:position + 1])

    def _apply(self, state: FormattedSessionState, step: KeystrokeStep) -> None:
        state.user_input += step.appended
        state.total_chars += len(step.appended)
        state.correct_chars += step.correct

        if not step.advanced:
            state.tab_fill += len(step.appended)
            return

        # The keystroke that leaves a position decides whether it matched.
        matched = step.correct > 0
        state.matched.append(matched)
        state.matched_positions += matched
        if self._completes_word(state, state.cursor):
            state.words_completed += 1

        state.cursor += 1
        state.tab_fill = 0
        if state.cursor >= len(self.target):
            log.debug("Reached end of formatted text")
            state.phase = Phase.FINISHED

    def _backspace(self, state: FormattedSessionState) -> None:
        if not state.journal:
            return

        for step in reversed(state.journal.pop()):
            state.user_input = state.user_input[: len(state.user_input) - len(step.appended)]
            state.total_chars -= len(step.appended)
            state.correct_chars -= step.correct
            if step.advanced:
                state.cursor -= 1
                if self._completes_word(state, state.cursor):
                    state.words_completed -= 1
                state.matched_positions -= state.matched.pop()
            state.tab_fill = step.tab_fill_before

    def expected_char(self, state: FormattedSessionState) -> Optional[str]:
        """Return the target character at the cursor, or None at the end."""
        if state.cursor >= len(self.target):
            return None
        return self.target[state.cursor]

    def progress(self, state: FormattedSessionState) -> TypingProgress:
        return build_formatted_progress(
            total_positions=len(self.target),
            total_words=len(self._spans),
            matched_positions=state.matched_positions,
            judged_positions=len(state.matched),
            words_completed=state.words_completed,
        )

    def user_input(self, state: FormattedSessionState) -> str:
        return state.user_input
