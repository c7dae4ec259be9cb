# app/levels.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import json
import logging

from app.config import LEVELS_FILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tier:
    min_wpm: int
    label: str
    icon: str = ""

    @property
    def display(self) -> str:
        return f"{self.icon} {self.label}".strip()


@dataclass(frozen=True)
class LevelTable:
    low_accuracy: Tier
    min_accuracy: int
    high_accuracy: int
    standard: Tuple[Tier, ...]
    high: Tuple[Tier, ...]

    def tier_for(self, wpm: int, accuracy: int) -> Tier:
        if accuracy < self.min_accuracy:
            return self.low_accuracy
        ladder = self.high if accuracy >= self.high_accuracy else self.standard
        chosen = ladder[0]
        for tier in ladder:
            if wpm >= tier.min_wpm:
                chosen = tier
        return chosen


# -------- Built-in table --------
DEFAULT_LEVELS = LevelTable(
    low_accuracy=Tier(0, "Below Average", "⚠️"),
    min_accuracy=60,
    high_accuracy=90,
    standard=(
        Tier(0, "Beginner", "🌱"),
        Tier(20, "Improving", "⚡"),
        Tier(30, "Good", "🚀"),
        Tier(40, "Great", "💫"),
        Tier(50, "Excellent", "🏆"),
    ),
    high=(
        Tier(0, "Beginner", "🌱"),
        Tier(20, "Learning", "📚"),
        Tier(30, "Improving", "⚡"),
        Tier(40, "Good", "🚀"),
        Tier(50, "Great", "💫"),
        Tier(60, "Excellent", "🏆"),
        Tier(80, "Master", "👑"),
    ),
)


# -------- helpers --------
def _tier_from_dict(d: Dict[str, Any]) -> Tier:
    if "label" not in d:
        raise ValueError("Missing tier key: label")
    return Tier(
        min_wpm=int(d.get("min_wpm", 0)),
        label=str(d["label"]),
        icon=str(d.get("icon", "")),
    )


def _ladder_from_list(items: Any, name: str) -> Tuple[Tier, ...]:
    if not isinstance(items, list) or not items:
        raise ValueError(f"Ladder '{name}' must be a non-empty list")
    tiers = tuple(sorted((_tier_from_dict(i) for i in items), key=lambda t: t.min_wpm))
    if tiers[0].min_wpm != 0:
        raise ValueError(f"Ladder '{name}' must start at min_wpm 0")
    return tiers


def level_table_from_dict(d: Dict[str, Any]) -> LevelTable:
    required = {"low_accuracy", "standard", "high"}
    missing = required - set(d.keys())
    if missing:
        raise ValueError(f"Missing level keys: {', '.join(sorted(missing))}")
    low = d["low_accuracy"]
    if isinstance(low, str):
        low = {"label": low}
    table = LevelTable(
        low_accuracy=_tier_from_dict(low),
        min_accuracy=int(d.get("min_accuracy", DEFAULT_LEVELS.min_accuracy)),
        high_accuracy=int(d.get("high_accuracy", DEFAULT_LEVELS.high_accuracy)),
        standard=_ladder_from_list(d["standard"], "standard"),
        high=_ladder_from_list(d["high"], "high"),
    )
    if table.min_accuracy > table.high_accuracy:
        raise ValueError("min_accuracy must not exceed high_accuracy")
    return table


# -------- public API --------
def load_level_table(path: Optional[Path] = None) -> LevelTable:
    """Load a level table from JSON, falling back to the built-in one."""
    path = Path(path) if path is not None else LEVELS_FILE
    if not path.exists():
        return DEFAULT_LEVELS
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Level file must contain a JSON object")
        return level_table_from_dict(data)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Ignoring level table %s: %s", path, e)
        return DEFAULT_LEVELS


def performance_level(wpm: int, accuracy: int, table: LevelTable = DEFAULT_LEVELS) -> str:
    return table.tier_for(wpm, accuracy).display
