# server/generator.py
"""
Practice text generation through an OpenAI-compatible chat-completions API.

Builds a domain prompt around a random topic, asks the model for a short
passage, then cleans and length-fits the answer for typing practice.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import json
import logging
import random
import re
import urllib.error
import urllib.request

from app import config
from app.config import GENERATED_MAX_CHARS, GENERATED_MIN_CHARS, normalize_domain
from app.errors import GenerationError

logger = logging.getLogger(__name__)

TOPICS: Dict[str, List[str]] = {
    "general": [
        "fascinating scientific breakthroughs", "historical mysteries", "technological innovations",
        "natural wonders", "space discoveries", "ancient civilizations", "modern inventions",
        "environmental phenomena", "cultural achievements", "medical advances",
    ],
    "story": [
        "time travel adventure", "mystery solving", "space exploration", "magical quest",
        "detective work", "superhero journey", "underwater expedition", "forest adventure",
        "robot friendship", "treasure hunting",
    ],
    "coding": [
        "algorithm optimization", "data structure design", "software architecture",
        "debugging techniques", "code refactoring", "performance tuning", "security practices",
        "API development", "database design", "testing strategies",
    ],
}

SYSTEM_PROMPTS: Dict[str, str] = {
    "general": "You are an educational content creator who writes interesting and engaging factual content.",
    "story": "You are a creative storyteller who writes engaging short stories for typing practice.",
    "coding": "You are an experienced software developer who explains programming concepts clearly.",
}

USER_PROMPTS: Dict[str, str] = {
    "general": (
        "Write a fascinating paragraph about {topic}. Include interesting facts that are "
        "educational and engaging. Make it suitable for typing practice with clear, flowing "
        "sentences. Seed: {seed}"
    ),
    "story": (
        "Write a unique, captivating short story (3-4 sentences) about {topic}. Make it creative "
        "and fun but keep it simple for typing practice. No dialogue or quotation marks. Seed: {seed}"
    ),
    "coding": (
        "Write an informative paragraph about {topic} in programming. Explain the concept clearly "
        "with practical insights. No code blocks, just explanatory text that's educational. Seed: {seed}"
    ),
}

_DISALLOWED = re.compile(r"""[^\w\s.,!?;:'"()-]""", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_END = re.compile(r"[.!?]+")

Completion = Callable[[List[Dict[str, str]]], str]


@dataclass(frozen=True)
class Prompt:
    domain: str
    topic: str
    seed: int
    system: str
    user: str

    @property
    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


@dataclass(frozen=True)
class GeneratedText:
    text: str
    domain: str
    topic: str


def build_prompt(domain: str, rng: Optional[random.Random] = None) -> Prompt:
    rng = rng or random.Random()
    domain = normalize_domain(domain)
    topic = rng.choice(TOPICS[domain])
    seed = rng.randrange(10000)
    return Prompt(
        domain=domain,
        topic=topic,
        seed=seed,
        system=SYSTEM_PROMPTS[domain],
        user=USER_PROMPTS[domain].format(topic=topic, seed=seed),
    )


def request_completion(
    messages: List[Dict[str, str]],
    temperature: float = 0.8,
    max_tokens: int = 200,
    top_p: float = 0.9,
) -> str:
    """POST one chat completion and return the first choice's content."""
    if not config.GROQ_API_KEY:
        raise GenerationError("GROQ_API_KEY is not set", status_code=401)

    payload = {
        "model": config.GROQ_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "top_p": top_p,
        "stream": False,
    }
    request = urllib.request.Request(
        config.GROQ_API_URL,
        data=json.dumps(payload).encode("utf-8"),
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.GROQ_API_KEY}",
        },
        method="POST",
    )
    try:
        with urllib.request.urlopen(request, timeout=config.GROQ_TIMEOUT_SECONDS) as response:
            data = json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as error:
        try:
            body = error.read().decode("utf-8")
        except Exception:
            body = str(error)
        raise GenerationError(f"{error.code} {body}", status_code=error.code) from error
    except (OSError, ValueError) as error:
        raise GenerationError(str(error)) from error

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def clean_text(raw: str) -> str:
    """Flatten to one line of plain, typeable ASCII punctuation."""
    text = _WHITESPACE.sub(" ", raw or "")
    text = _DISALLOWED.sub("", text)
    text = text.replace('"', "'")
    # removed characters can leave doubled spaces behind
    return _WHITESPACE.sub(" ", text).strip()


def fit_length(text: str) -> str:
    """Trim long text to its first two sentences; reject text that is too short."""
    if len(text) < GENERATED_MIN_CHARS:
        raise GenerationError("Generated content too short")
    if len(text) <= GENERATED_MAX_CHARS:
        return text

    sentences = _SENTENCE_END.split(text)
    fitted = ". ".join(s.strip() for s in sentences[:2] if s.strip())
    if len(fitted) > GENERATED_MAX_CHARS:
        fitted = fitted[:GENERATED_MAX_CHARS].rsplit(" ", 1)[0].rstrip(",;:-")
    if not fitted.endswith((".", "!", "?")):
        fitted += "."
    return fitted


def classify_error(error: Exception) -> Tuple[int, str]:
    """Status code and user-facing message for a failed generation."""
    message = str(error).lower()
    status = getattr(error, "status_code", 500)
    if status == 401 or "401" in message or "unauthorized" in message:
        return 401, "Invalid Groq API key. Please check GROQ_API_KEY"
    if status == 429 or "429" in message or "rate limit" in message:
        return 429, "Rate limit exceeded. Please wait a moment and try again"
    if "quota" in message or "billing" in message:
        return 402, "Groq API quota exceeded. Check your account at console.groq.com"
    return 500, "Error generating text"


def generate_practice_text(
    domain: str,
    complete: Optional[Completion] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedText:
    complete = complete or request_completion
    prompt = build_prompt(domain, rng)
    logger.info("Generating %s text about %s", prompt.domain, prompt.topic)

    raw = complete(prompt.messages)
    if not isinstance(raw, str) or not raw.strip():
        raise GenerationError("Empty response from model")

    text = fit_length(clean_text(raw))
    logger.info("Generated %d characters for %s", len(text), prompt.domain)
    return GeneratedText(text=text, domain=prompt.domain, topic=prompt.topic)
