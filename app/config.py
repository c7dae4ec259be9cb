# app/config.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Dict


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


# -------- session --------
SESSION_DURATION_MS = 30 * 1000
TICK_INTERVAL_MS = 100

# -------- text provider --------
DOMAINS = ("general", "story", "coding")
DEFAULT_DOMAIN = "general"

GENERATOR_URL = os.environ.get("HIPPOTYPE_GENERATOR_URL", "http://localhost:5000/generate")
FETCH_TIMEOUT_SECONDS = _env_float("HIPPOTYPE_FETCH_TIMEOUT", 10.0)

# generated text outside these bounds is replaced by the local fallback
MIN_PASSAGE_CHARS = 10
MAX_PASSAGE_CHARS = 1000

FALLBACK_TEXTS: Dict[str, str] = {
    "general": (
        "The quick brown fox jumps over the lazy dog. This pangram contains every "
        "letter of the alphabet at least once. It is commonly used for typing practice."
    ),
    "story": (
        "Once upon a time, there was a programmer who loved to type fast. Every day, "
        "they practiced their skills to become better at coding and writing."
    ),
    "coding": (
        "Programming languages help us communicate with computers. JavaScript is widely "
        "used for web development. Functions and variables are basic building blocks."
    ),
}

# -------- performance levels --------
_levels_file = os.environ.get("HIPPOTYPE_LEVELS_FILE", "levels.json")
LEVELS_FILE = Path(_levels_file)

# -------- generator service --------
SERVER_HOST = os.environ.get("HIPPOTYPE_HOST", "127.0.0.1")
SERVER_PORT = _env_int("HIPPOTYPE_PORT", 5000)

GROQ_API_KEY = os.environ.get("GROQ_API_KEY", "")
GROQ_API_URL = os.environ.get("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
GROQ_MODEL = os.environ.get("GROQ_MODEL", "openai/gpt-oss-20b")
GROQ_TIMEOUT_SECONDS = _env_float("GROQ_TIMEOUT", 30.0)

# the service trims or rejects generated text against these bounds
GENERATED_MIN_CHARS = 50
GENERATED_MAX_CHARS = 250

SERVER_FALLBACK_TEXTS: Dict[str, str] = {
    "general": (
        "Artificial intelligence continues to revolutionize various industries through "
        "machine learning algorithms. These systems can process vast amounts of data to "
        "identify patterns and make predictions with remarkable accuracy."
    ),
    "story": (
        "In a bustling digital world, a young programmer discovered an ancient coding "
        "secret hidden in legacy systems. This mysterious algorithm held the power to "
        "transform how computers understood human language."
    ),
    "coding": (
        "Modern software development relies heavily on version control systems to manage "
        "code changes. Git repositories allow multiple developers to collaborate "
        "efficiently while maintaining a complete history of project modifications."
    ),
}


def normalize_domain(domain) -> str:
    """Map any domain key onto one of DOMAINS; unknown keys become the default."""
    key = (domain or "").strip().lower() if isinstance(domain, str) else ""
    return key if key in DOMAINS else DEFAULT_DOMAIN
