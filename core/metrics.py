"""Accuracy, WPM and progress calculation utilities."""

import math
import re
from typing import Sequence

from core.models import ProgressStatus, TypingProgress

CHARS_PER_WORD = 5
TAB_WIDTH = 4

_WORD_SPAN = re.compile(r"\S+")


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def calculate_accuracy(correct_chars: int, total_chars: int) -> int:
    """Calculate accuracy percentage.

    Args:
        correct_chars: Correctly typed characters
        total_chars: All typed characters

    Returns:
        Accuracy rounded to a whole percent, or 100 if nothing was typed
    """
    if total_chars <= 0:
        return 100
    return _round_half_up(correct_chars / total_chars * 100)


def calculate_wpm(correct_chars: int, elapsed_minutes: float) -> int:
    """Calculate words per minute.

    One word is five correct characters.

    Args:
        correct_chars: Correctly typed characters
        elapsed_minutes: Time spent typing in minutes

    Returns:
        WPM rounded to a whole number, or 0 if no time has passed
    """
    if elapsed_minutes <= 0:
        return 0

    words = correct_chars / CHARS_PER_WORD
    return _round_half_up(words / elapsed_minutes)


def progress_status(progress_percentage: float) -> ProgressStatus:
    """Map a progress percentage to its styling bucket."""
    if progress_percentage >= 100:
        return "complete"
    if progress_percentage >= 75:
        return "high"
    if progress_percentage >= 50:
        return "medium"
    if progress_percentage >= 25:
        return "low"
    return "start"


def _progress_percentage(correct_chars: int, total_chars: int) -> float:
    if total_chars <= 0:
        return 0.0
    return _round_half_up(correct_chars / total_chars * 1000) / 10


def calculate_progress(
    words: Sequence[str], user_input: Sequence[str], cursor: int
) -> TypingProgress:
    """Calculate progress of word-mode input.

    Words before the cursor and the current word compare typed characters
    offset by offset. Words after the cursor contribute nothing.

    Args:
        words: Target words
        user_input: Typed text per word (may be shorter than words)
        cursor: Index of the word being typed

    Returns:
        TypingProgress for the input
    """
    if not words:
        return TypingProgress()

    total_chars = sum(len(word) for word in words)
    correct_chars = 0
    words_completed = 0
    typed_chars = 0

    for index, word in enumerate(words):
        typed = user_input[index] if index < len(user_input) else ""
        typed_chars += len(typed)

        if index > cursor:
            continue

        word_correct = sum(
            1 for expected, actual in zip(word, typed) if expected == actual
        )
        correct_chars += word_correct

        if index < cursor and len(typed) >= len(word) and word_correct == len(word):
            words_completed += 1

    percentage = _progress_percentage(correct_chars, total_chars)

    return TypingProgress(
        progress_percentage=percentage,
        words_completed=words_completed,
        total_words=len(words),
        correct_chars=correct_chars,
        total_chars=total_chars,
        accuracy=calculate_accuracy(correct_chars, typed_chars),
        status=progress_status(percentage),
    )


def align_formatted_input(text: str, user_input: str, cursor: int) -> list[bool]:
    """Judge every target position before the cursor against the typed string.

    Positions are consumed the way the formatted engine consumes keystrokes:
    a tab takes four spaces, or a shorter run of spaces followed by one
    mismatched keystroke; every other position takes one character.

    Args:
        text: Formatted target text
        user_input: Typed string
        cursor: Current target position

    Returns:
        One flag per target position before the cursor, True where matched
    """
    matched: list[bool] = []
    offset = 0

    for position in range(min(cursor, len(text))):
        expected = text[position]
        if expected == "\t":
            run = 0
            while run < TAB_WIDTH and user_input[offset + run:offset + run + 1] == " ":
                run += 1
            if run == TAB_WIDTH:
                matched.append(True)
                offset += TAB_WIDTH
            else:
                matched.append(False)
                offset += run + 1
        else:
            matched.append(user_input[offset:offset + 1] == expected)
            offset += 1

    return matched


def word_spans(text: str) -> list[tuple[int, int]]:
    """Return (start, end) of every whitespace-separated word in a text."""
    return [span.span() for span in _WORD_SPAN.finditer(text)]


def build_formatted_progress(
    total_positions: int,
    total_words: int,
    matched_positions: int,
    judged_positions: int,
    words_completed: int,
) -> TypingProgress:
    """Build formatted-mode progress from position counts.

    Args:
        total_positions: Characters in the target text
        total_words: Words in the target text
        matched_positions: Positions before the cursor typed correctly
        judged_positions: Positions before the cursor
        words_completed: Words whose positions are all matched

    Returns:
        TypingProgress where characters are target positions
    """
    if total_positions <= 0:
        return TypingProgress()

    percentage = _progress_percentage(matched_positions, total_positions)

    return TypingProgress(
        progress_percentage=percentage,
        words_completed=words_completed,
        total_words=total_words,
        correct_chars=matched_positions,
        total_chars=total_positions,
        accuracy=calculate_accuracy(matched_positions, judged_positions),
        status=progress_status(percentage),
    )


def calculate_formatted_progress(
    text: str, user_input: str, cursor: int
) -> TypingProgress:
    """Calculate progress of formatted-mode input.

    Args:
        text: Formatted target text
        user_input: Typed string
        cursor: Current target position

    Returns:
        TypingProgress where characters are target positions
    """
    if not text:
        return TypingProgress()

    matched = align_formatted_input(text, user_input, cursor)
    spans = word_spans(text)
    words_completed = sum(
        1 for start, end in spans if end <= len(matched) and all(matched[start:end])
    )

    return build_formatted_progress(
        total_positions=len(text),
        total_words=len(spans),
        matched_positions=sum(matched),
        judged_positions=len(matched),
        words_completed=words_completed,
    )
