# services/session_controller.py
from __future__ import annotations
from collections import deque
from typing import Callable, List, Optional, Tuple
import logging
import time

from PySide6.QtCore import QObject, Signal, Slot

from app.config import DEFAULT_DOMAIN, normalize_domain
from app.levels import DEFAULT_LEVELS, LevelTable
from core.chrono import SessionTicker
from core.threads import TextFetchWorker, Workers
from services.text_provider import get_practice_text
from services.typing_engine import Event, Reset, Status, Tick, TypingSession

logger = logging.getLogger(__name__)


class SessionController(QObject):
    """
    Owns the live TypingSession and its ticker.

    Every keystroke and tick is routed into TypingSession.dispatch on the GUI
    thread; listeners only ever see immutable snapshots.
    """

    loading = Signal(str)             # domain
    ready = Signal(object)            # Snapshot of the fresh idle session
    snapshotChanged = Signal(object)  # Snapshot
    finished = Signal(object)         # Summary

    def __init__(
        self,
        provider: Callable[[str], str] = get_practice_text,
        clock: Callable[[], float] = time.monotonic,
        levels: LevelTable = DEFAULT_LEVELS,
        start_worker: Optional[Callable[[TextFetchWorker], None]] = None,
        ticker: Optional[SessionTicker] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.provider = provider
        self.clock = clock
        self.levels = levels
        self._start_worker = start_worker or Workers.pool.start

        self.ticker = ticker or SessionTicker(parent=self)
        self.ticker.tick.connect(self.on_tick)

        self.session: Optional[TypingSession] = None
        self.domain = DEFAULT_DOMAIN
        self._ticket = 0
        self._finished_sent = False
        self._wpm_history: deque = deque(maxlen=3600)

    # ---------------- lifecycle ----------------
    def new_game(self, domain: str = DEFAULT_DOMAIN):
        """Drop the current session and request a passage for a new one."""
        self.ticker.stop()
        self.session = None
        self._finished_sent = False
        self._wpm_history.clear()
        self.domain = normalize_domain(domain)
        self._ticket += 1
        logger.info("Starting new game: %s", self.domain)
        self.loading.emit(self.domain)

        worker = TextFetchWorker(self.domain, self._ticket, self.provider)
        worker.signals.loaded.connect(self._on_text_loaded)
        self._start_worker(worker)

    @Slot(int, str)
    def _on_text_loaded(self, ticket: int, text: str):
        if ticket != self._ticket:
            logger.debug("Discarding passage for superseded request %d", ticket)
            return
        self.session = TypingSession(text, clock=self.clock, levels=self.levels)
        logger.info("Game ready with %d words", len(self.session.words))
        self.ready.emit(self.session.snapshot())

    def reset(self):
        """End the running session now, as if its time had run out."""
        self._dispatch(Reset())

    # ---------------- input ----------------
    def handle_key(self, name: str) -> bool:
        if self.session is None:
            return False
        was_idle = self.session.status is Status.IDLE
        changed = self.session.key(name)
        if was_idle and self.session.status is Status.RUNNING:
            self.ticker.start()
        if changed:
            self._publish()
        return changed

    @Slot()
    def on_tick(self):
        if self.session is None:
            return
        if self._dispatch(Tick()) and self.session.status is Status.RUNNING:
            self._wpm_history.append((self.session.elapsed_seconds(), self.session.wpm()))

    def _dispatch(self, event: Event) -> bool:
        if self.session is None:
            return False
        changed = self.session.dispatch(event)
        if changed:
            self._publish()
        return changed

    # ---------------- output ----------------
    @property
    def wpm_history(self) -> List[Tuple[float, int]]:
        return list(self._wpm_history)

    def _publish(self):
        session = self.session
        self.snapshotChanged.emit(session.snapshot())
        if session.status is Status.ENDED and not self._finished_sent:
            self._finished_sent = True
            self.ticker.stop()
            summary = session.summary
            logger.info("Game ended: %d WPM, %d%% accuracy", summary.wpm, summary.accuracy)
            self.finished.emit(summary)
