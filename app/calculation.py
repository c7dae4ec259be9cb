from typing import List, Optional
import math

CHARS_PER_WORD = 5
MIN_ELAPSED_MINUTES = 1e-6


def round_half_up(value: float) -> int:
    """Round .5 away from the floor, the way browser Math.round does (-0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def elapsed_minutes(elapsed_seconds: float) -> float:
    return max(MIN_ELAPSED_MINUTES, elapsed_seconds / 60.0)


def wpm(total_typed: int, elapsed_seconds: Optional[float]) -> int:
    """
    WPM = (keystrokes / 5) / minutes.
    Every accepted keystroke counts, right or wrong; a session that never
    started (elapsed_seconds is None) scores 0.
    """
    if elapsed_seconds is None:
        return 0
    words = total_typed / float(CHARS_PER_WORD)
    return round_half_up(words / elapsed_minutes(elapsed_seconds))


def accuracy(total_typed: int, error_count: int) -> int:
    """
    Percentage of keystrokes that were not errors.
    Not clamped: errors from skipped characters can exceed keystrokes.
    """
    if total_typed == 0:
        return 100
    return round_half_up(((total_typed - error_count) / total_typed) * 100)


def smooth(values: List[float], factor: float = 0.25) -> List[float]:
    out, last = [], None
    for v in values:
        last = v if last is None else last + factor * (v - last)
        out.append(last)
    return out
