# core/threads.py
from typing import Callable
import logging

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from services.text_provider import fallback_text, get_practice_text

logger = logging.getLogger(__name__)


class TextFetchWorkerSignals(QObject):
    loaded = Signal(int, str)  # request ticket, passage


class TextFetchWorker(QRunnable):
    def __init__(self, domain: str, ticket: int,
                 provider: Callable[[str], str] = get_practice_text):
        super().__init__()
        self.domain = domain
        self.ticket = ticket
        self.provider = provider
        self.signals = TextFetchWorkerSignals()

    def run(self):
        try:
            text = self.provider(self.domain)
        except Exception:
            # providers should not raise; the engine still needs a passage
            logger.exception("Text provider failed for %s", self.domain)
            text = fallback_text(self.domain)
        if not (text or "").split():
            text = fallback_text(self.domain)
        self.signals.loaded.emit(self.ticket, text)


class Workers:
    pool = QThreadPool.globalInstance()
