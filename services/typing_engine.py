# services/typing_engine.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union
import time

from app.calculation import accuracy, round_half_up, wpm
from app.config import SESSION_DURATION_MS
from app.levels import DEFAULT_LEVELS, LevelTable, performance_level


class Verdict(str, Enum):
    PENDING = "pending"
    CURRENT = "current"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Status(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


@dataclass
class Character:
    glyph: str
    verdict: Verdict = Verdict.PENDING


@dataclass
class Word:
    chars: List[Character] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chars)

    @property
    def text(self) -> str:
        return "".join(c.glyph for c in self.chars)


def tokenize(text: str) -> List[Word]:
    """Split on whitespace, dropping empty tokens; each token becomes a Word."""
    return [Word([Character(g) for g in token]) for token in (text or "").split()]


# -------- events --------
@dataclass(frozen=True)
class CharacterTyped:
    glyph: str


@dataclass(frozen=True)
class SpaceTyped:
    pass


@dataclass(frozen=True)
class BackspaceTyped:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class TimeUp:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[CharacterTyped, SpaceTyped, BackspaceTyped, Tick, TimeUp, Reset]
_KEY_EVENTS = (CharacterTyped, SpaceTyped, BackspaceTyped)


def event_for_key(name: str) -> Optional[Event]:
    """Map a key name (" ", "Backspace", or a single glyph) to an event."""
    if name == " ":
        return SpaceTyped()
    if name == "Backspace":
        return BackspaceTyped()
    if name and len(name) == 1 and name.isprintable():
        return CharacterTyped(name)
    return None


# -------- read-only views --------
@dataclass(frozen=True)
class CharView:
    glyph: str
    verdict: Verdict


@dataclass(frozen=True)
class WordView:
    chars: Tuple[CharView, ...]

    @property
    def text(self) -> str:
        return "".join(c.glyph for c in self.chars)


@dataclass(frozen=True)
class Snapshot:
    words: Tuple[WordView, ...]
    cursor: Tuple[int, int]
    status: Status
    elapsed_seconds: Optional[float]
    seconds_left: int
    wpm: int
    accuracy: int


@dataclass(frozen=True)
class Summary:
    wpm: int
    accuracy: int
    level: str


class TypingSession:
    """
    One typing game over one passage.

    All mutation goes through dispatch(); key and timer events share it, so
    the session has a single writer. Events that do not apply in the
    current state are ignored rather than raised.
    """

    def __init__(
        self,
        text: str,
        clock: Callable[[], float] = time.monotonic,
        duration_ms: int = SESSION_DURATION_MS,
        levels: LevelTable = DEFAULT_LEVELS,
    ):
        self.words = tokenize(text)
        if not self.words:
            raise ValueError("Passage has no words")
        self.clock = clock
        self.duration = duration_ms / 1000.0
        self.levels = levels

        self.word_index = 0
        self.char_index = 0
        self.total_typed = 0
        self.error_count = 0
        self.status = Status.IDLE
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.summary: Optional[Summary] = None

        self.words[0].chars[0].verdict = Verdict.CURRENT

    # ---------------- state ----------------
    @property
    def cursor(self) -> Tuple[int, int]:
        return self.word_index, self.char_index

    def elapsed_seconds(self) -> Optional[float]:
        if self.start_time is None:
            return None
        end = self.end_time if self.end_time is not None else self.clock()
        return max(0.0, end - self.start_time)

    def seconds_left(self) -> int:
        elapsed = self.elapsed_seconds() or 0.0
        return max(0, round_half_up(self.duration - elapsed))

    def wpm(self) -> int:
        return wpm(self.total_typed, self.elapsed_seconds())

    def accuracy(self) -> int:
        return accuracy(self.total_typed, self.error_count)

    def level(self) -> str:
        return performance_level(self.wpm(), self.accuracy(), self.levels)

    # ---------------- events ----------------
    def key(self, name: str) -> bool:
        event = event_for_key(name)
        if event is None:
            return False
        return self.dispatch(event)

    def dispatch(self, event: Event) -> bool:
        """Apply one event; returns True when anything observable changed."""
        if self.status is Status.ENDED:
            return False
        if isinstance(event, (TimeUp, Reset)):
            self._end()
            return True
        if isinstance(event, Tick):
            return self._tick()
        if not isinstance(event, _KEY_EVENTS):
            return False

        started = False
        if self.status is Status.IDLE:
            self.start_time = self.clock()
            self.status = Status.RUNNING
            started = True
        elif self._time_is_up():
            self._end()
            return True

        if isinstance(event, CharacterTyped):
            changed = self._type_char(event.glyph)
        elif isinstance(event, SpaceTyped):
            changed = self._space()
        else:
            changed = self._backspace()
        return changed or started

    def _time_is_up(self) -> bool:
        elapsed = self.elapsed_seconds()
        return elapsed is not None and elapsed >= self.duration

    def _tick(self) -> bool:
        if self.status is not Status.RUNNING:
            return False
        if self._time_is_up():
            self._end()
        return True

    def _type_char(self, glyph: str) -> bool:
        word = self.words[self.word_index]
        if self.char_index >= len(word):
            return False  # word done, space expected

        ch = word.chars[self.char_index]
        if glyph == ch.glyph:
            ch.verdict = Verdict.CORRECT
        else:
            ch.verdict = Verdict.INCORRECT
            self.error_count += 1

        self.total_typed += 1
        self.char_index += 1
        if self.char_index < len(word):
            word.chars[self.char_index].verdict = Verdict.CURRENT
        return True

    def _space(self) -> bool:
        word = self.words[self.word_index]
        for ch in word.chars[self.char_index:]:
            if ch.verdict is not Verdict.CORRECT:
                ch.verdict = Verdict.INCORRECT
                self.error_count += 1

        if self.word_index < len(self.words) - 1:
            self.word_index += 1
            self.char_index = 0
            self.words[self.word_index].chars[0].verdict = Verdict.CURRENT
        else:
            self.word_index = len(self.words)
            self.char_index = 0
            self._end()
        return True

    def _backspace(self) -> bool:
        if self.char_index == 0:
            return False  # no crossing back into the previous word
        word = self.words[self.word_index]
        if self.char_index < len(word):
            word.chars[self.char_index].verdict = Verdict.PENDING
        self.char_index -= 1
        word.chars[self.char_index].verdict = Verdict.CURRENT
        if self.total_typed > 0:
            self.total_typed -= 1
        return True

    def _end(self) -> None:
        if self.start_time is not None:
            # a late tick must not stretch the session past its duration
            self.end_time = min(self.clock(), self.start_time + self.duration)
        self.status = Status.ENDED
        self.summary = Summary(wpm=self.wpm(), accuracy=self.accuracy(), level=self.level())

    # ---------------- views ----------------
    def snapshot(self) -> Snapshot:
        words = tuple(
            WordView(tuple(CharView(c.glyph, c.verdict) for c in w.chars))
            for w in self.words
        )
        return Snapshot(
            words=words,
            cursor=self.cursor,
            status=self.status,
            elapsed_seconds=self.elapsed_seconds(),
            seconds_left=self.seconds_left(),
            wpm=self.wpm(),
            accuracy=self.accuracy(),
        )
