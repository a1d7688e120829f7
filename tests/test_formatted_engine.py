"""Tests for core.formatted_engine module."""

import time

import pytest

from core.formatted_engine import FormattedEngine, FormattedSessionState
from core.metrics import calculate_formatted_progress
from core.models import Phase
from utils.keys import parse_key


def playing_state(engine):
    state = engine.new_state()
    state.phase = Phase.PLAYING
    return state


def press(engine, state, keys):
    for key in keys:
        state = engine.apply_key(state, parse_key(key))
    return state


def counts(state):
    return state.correct_chars, state.total_chars, state.cursor


class TestFormattedTyping:
    """Tests for character handling."""

    def test_new_state(self):
        engine = FormattedEngine("ab")
        state = engine.new_state()

        assert isinstance(state, FormattedSessionState)
        assert state.user_input == ""
        assert state.cursor == 0

    def test_match_advances(self):
        engine = FormattedEngine("abc")
        state = press(engine, playing_state(engine), "ab")

        assert counts(state) == (2, 2, 2)
        assert state.user_input == "ab"

    def test_mismatch_still_advances(self):
        """Test a wrong key consumes its target position."""
        engine = FormattedEngine("abc")
        state = press(engine, playing_state(engine), "x")

        assert counts(state) == (0, 1, 1)
        assert state.accuracy == 0

    def test_enter_types_newline(self):
        engine = FormattedEngine("a\nb")
        state = press(engine, playing_state(engine), ["a", "Enter"])

        assert state.user_input == "a\n"
        assert counts(state) == (2, 2, 2)

    def test_reaching_end_finishes(self):
        engine = FormattedEngine("ab")
        state = press(engine, playing_state(engine), "ax")

        assert state.phase == Phase.FINISHED
        assert state.cursor == 2

    def test_whitespace_typed_verbatim(self):
        engine = FormattedEngine("a b\nc")
        state = press(engine, playing_state(engine), ["a", "Space", "b", "Enter", "c"])

        assert state.phase == Phase.FINISHED
        assert counts(state) == (5, 5, 5)


class TestTabEquivalence:
    """Tests for tab/space equivalence."""

    def test_tab_key_on_target_tab(self):
        """Test one Tab press fully satisfies a target tab."""
        engine = FormattedEngine("a\tb")
        state = press(engine, playing_state(engine), ["a", "Tab"])

        assert state.user_input == "a    "
        assert counts(state) == (5, 5, 2)

    def test_spaces_hold_cursor_on_tab(self):
        """Test spaces are correct but do not advance until the fourth."""
        engine = FormattedEngine("\tb")
        state = playing_state(engine)

        for typed in range(1, 4):
            state = press(engine, state, " ")
            assert counts(state) == (typed, typed, 0)
            assert state.tab_fill == typed

        state = press(engine, state, " ")
        assert counts(state) == (4, 4, 1)
        assert state.tab_fill == 0

    def test_tab_and_spaces_are_equivalent(self):
        """Test Tab and four spaces end in the same counts and cursor."""
        engine = FormattedEngine("a\tb")
        with_tab = press(engine, playing_state(engine), ["a", "Tab", "b"])
        with_spaces = press(engine, playing_state(engine), ["a", " ", " ", " ", " ", "b"])

        assert counts(with_tab) == counts(with_spaces) == (6, 6, 3)
        assert with_tab.phase == with_spaces.phase == Phase.FINISHED

    def test_tab_key_elsewhere_types_four_spaces(self):
        """Test Tab away from a target tab is four ordinary spaces."""
        engine = FormattedEngine("a    b")
        state = press(engine, playing_state(engine), ["a", "Tab"])

        assert state.user_input == "a    "
        assert counts(state) == (5, 5, 5)

    def test_tab_key_mismatch(self):
        engine = FormattedEngine("abcdef")
        state = press(engine, playing_state(engine), ["Tab"])

        assert counts(state) == (0, 4, 4)

    def test_tab_key_completes_partial_fill(self):
        """Test Tab after some spaces only adds the missing spaces."""
        engine = FormattedEngine("\tb")
        state = press(engine, playing_state(engine), [" ", " ", "Tab"])

        assert state.user_input == "    "
        assert counts(state) == (4, 4, 1)

    def test_other_key_breaks_tab_fill(self):
        """Test a non-space key on a partly filled tab is a mismatch."""
        engine = FormattedEngine("\tb")
        state = press(engine, playing_state(engine), [" ", " ", "x"])

        assert counts(state) == (2, 3, 1)
        assert state.tab_fill == 0

    def test_space_target_before_tab(self):
        """Test a space typed for a space target is not counted as tab fill."""
        engine = FormattedEngine(" \tb")
        state = press(engine, playing_state(engine), [" ", " ", " ", " "])

        assert state.cursor == 1
        assert state.tab_fill == 3

    def test_tab_key_at_end_stops_when_finished(self):
        """Test a Tab expanding into spaces stops at the end of the text."""
        engine = FormattedEngine("a  ")
        state = press(engine, playing_state(engine), ["a", "Tab"])

        assert state.phase == Phase.FINISHED
        assert state.user_input == "a  "
        assert counts(state) == (3, 3, 3)


class TestFormattedBackspace:
    """Tests for backspace handling."""

    @pytest.mark.parametrize("key", ["x", "b", "Space", "Enter", "Tab"])
    def test_backspace_undoes_key_on_plain_target(self, key):
        engine = FormattedEngine("ab      cd")
        before = press(engine, playing_state(engine), ["a"])
        after = press(engine, before, [key, "Backspace"])

        assert after.user_input == before.user_input
        assert counts(after) == counts(before)

    @pytest.mark.parametrize("key", ["x", "Space", "Enter", "Tab"])
    def test_backspace_undoes_key_on_tab_target(self, key):
        engine = FormattedEngine("a\tb")
        before = press(engine, playing_state(engine), ["a"])
        after = press(engine, before, [key, "Backspace"])

        assert after.user_input == before.user_input
        assert counts(after) == counts(before)
        assert after.tab_fill == before.tab_fill

    def test_backspace_mid_tab_keeps_cursor(self):
        engine = FormattedEngine("\tb")
        state = press(engine, playing_state(engine), [" ", " ", "Backspace"])

        assert counts(state) == (1, 1, 0)
        assert state.tab_fill == 1

    def test_backspace_completed_tab_returns_to_tab(self):
        """Test removing the fourth space reopens the tab with three spaces."""
        engine = FormattedEngine("\tbc")
        state = press(engine, playing_state(engine), [" ", " ", " ", " ", "Backspace"])

        assert counts(state) == (3, 3, 0)
        assert state.tab_fill == 3

        state = press(engine, state, " ")
        assert counts(state) == (4, 4, 1)

    def test_backspace_on_empty_input_is_noop(self):
        engine = FormattedEngine("ab")
        state = press(engine, playing_state(engine), ["Backspace"])

        assert counts(state) == (0, 0, 0)

    def test_backspace_all_the_way(self):
        engine = FormattedEngine("a\tbc")
        state = press(engine, playing_state(engine), ["a", "Tab", "x"])
        state = press(engine, state, ["Backspace"] * 3)

        assert state.user_input == ""
        assert counts(state) == (0, 0, 0)

    def test_counts_stay_ordered(self):
        engine = FormattedEngine("def f():\n\treturn 1\n")
        state = playing_state(engine)
        keys = ["d", "x", "Backspace", "e", "f", "Space", "f", "(", ")", ":",
                "Enter", " ", " ", "Backspace", "Tab", "r", "Backspace", "Backspace"]
        for key in keys:
            state = engine.apply_key(state, parse_key(key))
            assert 0 <= state.correct_chars <= state.total_chars
            assert 0 <= state.cursor <= len(engine.target)


class TestFormattedProgress:
    """Tests for progress reporting."""

    def test_progress_after_tab(self):
        engine = FormattedEngine("a\tb")
        state = press(engine, playing_state(engine), ["a", "Tab"])
        progress = engine.progress(state)

        assert progress.correct_chars == 2
        assert progress.total_chars == 3

    def test_expected_char(self):
        engine = FormattedEngine("a\t")
        state = press(engine, playing_state(engine), ["a"])

        assert engine.expected_char(state) == "\t"

    @pytest.mark.parametrize(
        "keys",
        [
            ["i", "f", "Space", "x", ":", "Enter", "Tab", "g", "o"],
            ["i", "g", "Space", "x", ":", "Enter", " ", " ", "y", "g", "o"],
            ["i", "f", "Backspace", "f", "Space", "x", ":", "Enter",
             " ", " ", "Tab", "g", "Backspace", "g"],
        ],
    )
    def test_running_progress_matches_alignment(self, keys):
        """Test incremental progress agrees with aligning the typed string."""
        text = "if x:\n\tgo"
        engine = FormattedEngine(text)
        state = playing_state(engine)

        for key in keys:
            state = engine.apply_key(state, parse_key(key))
            expected = calculate_formatted_progress(text, state.user_input, state.cursor)
            assert engine.progress(state) == expected

    def test_words_completed_drops_on_backspace(self):
        engine = FormattedEngine("ab cd")
        state = press(engine, playing_state(engine), "ab")
        assert engine.progress(state).words_completed == 1

        state = press(engine, state, ["Backspace"])
        assert engine.progress(state).words_completed == 0


class TestFormattedTransitions:
    """Tests for state copies between keystrokes."""

    def test_previous_state_unchanged(self):
        engine = FormattedEngine("a\tb")
        before = press(engine, playing_state(engine), ["a"])
        after = press(engine, before, ["Tab", "x"])

        assert before.user_input == "a"
        assert len(before.journal) == 1
        assert before.matched == [True]
        assert after.matched == [True, True, False]

    def test_long_document_types_quickly(self):
        """Test per-key cost does not grow with the typed length."""
        text = "def f(x):\n\treturn x + 1\n" * 200
        engine = FormattedEngine(text)
        state = playing_state(engine)

        started = time.perf_counter()
        for char in text:
            state = engine.apply_key(state, parse_key(char))
        elapsed = time.perf_counter() - started

        assert state.phase == Phase.FINISHED
        assert engine.progress(state).progress_percentage == 100
        assert elapsed < 10
