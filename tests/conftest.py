"""Shared test fixtures for TypeNinja tests."""

import random

import pytest

from core.models import SessionConfig, SessionMode
from core.performance import InMemoryPerformanceLog
from core.session import TypingSession
from core.session_timer import ManualSessionTimer
from core.text_source import RandomWordSource


class FixedWordSource(RandomWordSource):
    """Word source that always returns the same words."""

    def __init__(self, words):
        super().__init__(corpus=words, rng=random.Random(0))
        self.words = tuple(words)

    def generate(self, count: int = 25) -> tuple[str, ...]:
        return self.words[:count]


def type_keys(session, keys):
    """Send every key of an iterable to a session."""
    for key in keys:
        session.handle_key(key)
    return session.snapshot()


@pytest.fixture
def manual_timer():
    """Timer whose ticks are delivered by the test."""
    return ManualSessionTimer()


@pytest.fixture
def performance_log():
    """In-memory performance sink."""
    return InMemoryPerformanceLog()


@pytest.fixture
def word_session(manual_timer, performance_log):
    """Words-mode session over 'hello world'."""
    return TypingSession(
        config=SessionConfig(mode=SessionMode.WORDS, target_word_count=2),
        text_source=FixedWordSource(["hello", "world"]),
        performance_sink=performance_log,
        timer=manual_timer,
    )


@pytest.fixture
def time_session(manual_timer, performance_log):
    """Fifteen-second time-mode session over random words."""
    return TypingSession(
        config=SessionConfig(mode=SessionMode.TIME, target_duration_seconds=15),
        text_source=RandomWordSource(rng=random.Random(42)),
        performance_sink=performance_log,
        timer=manual_timer,
    )


@pytest.fixture
def qapp():
    """Qt core application for QTimer based tests."""
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app
