"""Typing session lifecycle: pending, playing, finished."""

import logging
from typing import Callable, Optional

from core.engine import RECENT_KEYS_LIMIT, SessionState, TypingEngine
from core.formatted_engine import FormattedEngine
from core.metrics import calculate_accuracy, calculate_wpm
from core.models import (
    PerformanceSummary,
    Phase,
    SessionConfig,
    SessionMode,
    SessionSnapshot,
)
from core.performance import PerformanceSink
from core.session_timer import ManualSessionTimer, QtSessionTimer, SessionTimer
from core.text_source import RandomWordSource, to_word_sequence
from core.word_engine import WordEngine
from utils.config import Config
from utils.keys import KeyEvent, parse_key

log = logging.getLogger("typeninja.session")

# Random words generated for time mode, enough not to run out.
TIME_MODE_WORD_POOL = 200


class TypingSession:
    """Owns one typing session and wires keys and timer ticks into it."""

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        text_source: Optional[RandomWordSource] = None,
        performance_sink: Optional[PerformanceSink] = None,
        timer: Optional[SessionTimer] = None,
        on_change: Optional[Callable[[SessionSnapshot], None]] = None,
        recent_keys_limit: int = RECENT_KEYS_LIMIT,
    ):
        """Initialize typing session.

        Args:
            config: Session parameters (defaults to 25 random words)
            text_source: Random word generator
            performance_sink: Receives summaries of finished custom-text sessions
            timer: Tick source (defaults to a manual timer)
            on_change: Callback receiving a snapshot after every change
            recent_keys_limit: Length of the recent keys display log
        """
        self.config = config or SessionConfig()
        self.text_source = text_source or RandomWordSource()
        self.performance_sink = performance_sink
        self.timer = timer or ManualSessionTimer()
        self.on_change = on_change
        self.recent_keys_limit = recent_keys_limit

        self.custom_text: Optional[str] = None
        self.document_id: Optional[str] = None
        self.engine: TypingEngine
        self.state: SessionState
        self._summary: Optional[PerformanceSummary] = None

        self.initialize()

    @classmethod
    def from_config(
        cls,
        config: Config,
        timer: Optional[SessionTimer] = None,
        **kwargs,
    ) -> "TypingSession":
        """Create a session from trainer settings.

        Without an explicit timer the session ticks from the Qt event loop
        at the configured interval.
        """
        return cls(
            config=config.session_config(),
            timer=timer or QtSessionTimer(config.get("timer_interval_ms")),
            recent_keys_limit=config.get("recent_keys_limit"),
            **kwargs,
        )

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def summary(self) -> Optional[PerformanceSummary]:
        """Summary of the finished session, or None before it finishes."""
        return self._summary

    @property
    def is_custom_practice(self) -> bool:
        return self.custom_text is not None

    def initialize(
        self,
        config: Optional[SessionConfig] = None,
        custom_text: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> None:
        """Prepare a fresh pending session.

        Without custom_text the current source is kept: custom text already
        set stays, otherwise random words are generated.

        Args:
            config: New session parameters (keeps the current ones if None)
            custom_text: Document or custom text to type
            document_id: Identifier the performance is recorded under
        """
        self.timer.stop()

        if config is not None:
            self.config = config
        if custom_text is not None:
            self.custom_text = custom_text
            self.document_id = document_id or "custom"

        self.engine = self._create_engine()
        self.state = self.engine.new_state(self.recent_keys_limit)
        self._summary = None

        log.info(
            f"Session initialized: mode={self.config.mode.value}, "
            f"formatted={self.engine.formatted}, custom={self.is_custom_practice}"
        )
        self._notify_change()

    def _create_engine(self) -> TypingEngine:
        if self.custom_text is not None:
            if self.config.preserve_formatting:
                return FormattedEngine(self.custom_text)
            return WordEngine(to_word_sequence(self.custom_text))

        if self.config.mode == SessionMode.TIME:
            count = max(self.config.target_word_count, TIME_MODE_WORD_POOL)
        else:
            count = self.config.target_word_count
        return WordEngine(self.text_source.generate(count))

    def clear_custom_text(self) -> None:
        """Return to random-word practice with a fresh session."""
        self.custom_text = None
        self.document_id = None
        self.initialize()

    def start(self) -> None:
        """Move from pending to playing and start the timer."""
        if self.state.phase != Phase.PENDING:
            return

        self.state.phase = Phase.PLAYING
        if self.config.mode == SessionMode.TIME:
            self.state.elapsed_seconds = self.config.target_duration_seconds
        else:
            self.state.elapsed_seconds = 0

        self.timer.start(self.tick)
        log.info("Session started")

    def handle_key(self, key: str) -> SessionSnapshot:
        """Process a raw key identifier.

        Keys that do not take part in typing and keys after the session
        finished are ignored.

        Args:
            key: Single character or key name (Backspace, Tab, Enter, Space)

        Returns:
            Snapshot of the session after the key
        """
        event = parse_key(key)
        if event is None or self.state.phase == Phase.FINISHED:
            return self.snapshot()
        return self.apply_event(event)

    def apply_event(self, event: KeyEvent) -> SessionSnapshot:
        """Process a parsed key event."""
        if self.state.phase == Phase.FINISHED:
            return self.snapshot()
        if self.state.phase == Phase.PENDING:
            self.start()

        state = self.engine.apply_key(self.state, event)
        state.log_key(event.label)
        self.state = state

        if state.phase == Phase.FINISHED:
            self.finish()
        else:
            self._notify_change()
        return self.snapshot()

    def tick(self) -> None:
        """Advance the clock by one second and recompute WPM."""
        if self.state.phase != Phase.PLAYING:
            return

        if self.config.mode == SessionMode.TIME:
            self.state.elapsed_seconds = max(0, self.state.elapsed_seconds - 1)
        else:
            self.state.elapsed_seconds += 1

        self._recompute()

        if self.config.mode == SessionMode.TIME and self.state.elapsed_seconds <= 0:
            log.info("Time is up")
            self.finish()
        else:
            self._notify_change()

    def elapsed_minutes(self) -> float:
        """Time spent typing so far, in minutes."""
        if self.config.mode == SessionMode.TIME:
            spent = self.config.target_duration_seconds - self.state.elapsed_seconds
        else:
            spent = self.state.elapsed_seconds
        return spent / 60.0

    def _recompute(self) -> None:
        self.state.accuracy = calculate_accuracy(
            self.state.correct_chars, self.state.total_chars
        )
        self.state.wpm = calculate_wpm(self.state.correct_chars, self.elapsed_minutes())

    def finish(self) -> Optional[PerformanceSummary]:
        """Stop the session and emit its summary.

        Calling finish again, or before the session started, does nothing.

        Returns:
            The session summary, or None if the session never started
        """
        self.timer.stop()

        if self._summary is not None or self.state.phase == Phase.PENDING:
            return self._summary

        self.state.phase = Phase.FINISHED
        self._recompute()
        self._summary = PerformanceSummary(
            wpm=self.state.wpm,
            accuracy=self.state.accuracy,
            correct_chars=self.state.correct_chars,
            total_chars=self.state.total_chars,
            elapsed_seconds=self.state.elapsed_seconds,
        )
        log.info(
            f"Session finished: {self._summary.wpm} WPM, "
            f"{self._summary.accuracy}% accuracy"
        )

        if self.is_custom_practice and self.performance_sink is not None:
            try:
                self.performance_sink.record_performance(self.document_id, self._summary)
            except Exception as e:
                log.exception(f"Failed to record performance: {e}")

        self._notify_change()
        return self._summary

    def reset(self, config: Optional[SessionConfig] = None) -> None:
        """Discard the session and start a fresh pending one."""
        self.timer.stop()
        log.info("Session reset")
        self.initialize(config)

    def snapshot(self) -> SessionSnapshot:
        """Plain-data view of the current state."""
        return SessionSnapshot(
            phase=self.state.phase,
            mode=self.config.mode,
            formatted=self.engine.formatted,
            cursor=self.state.cursor,
            user_input=self.engine.user_input(self.state),
            correct_chars=self.state.correct_chars,
            total_chars=self.state.total_chars,
            accuracy=self.state.accuracy,
            wpm=self.state.wpm,
            elapsed_seconds=self.state.elapsed_seconds,
            recent_keys=list(self.state.recent_keys),
            progress=self.engine.progress(self.state),
        )

    def _notify_change(self) -> None:
        """Notify callback about a session change."""
        if self.on_change is None:
            return
        try:
            self.on_change(self.snapshot())
        except Exception as e:
            log.error(f"Error in session change callback: {e}")