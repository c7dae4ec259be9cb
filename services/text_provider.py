# services/text_provider.py
from __future__ import annotations
from typing import Callable, Optional
import http.client
import json
import logging
import time
import urllib.parse
import urllib.request

from app.config import (
    FALLBACK_TEXTS,
    FETCH_TIMEOUT_SECONDS,
    GENERATOR_URL,
    MAX_PASSAGE_CHARS,
    MIN_PASSAGE_CHARS,
    normalize_domain,
)
from app.errors import TextProviderError

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, float], bytes]


def _http_get(url: str, timeout: float) -> bytes:
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    with urllib.request.urlopen(request, timeout=timeout) as response:
        return response.read()


def build_request_url(domain: str, nonce: Optional[int] = None) -> str:
    """Generator URL for a domain; the nonce keeps caches from replaying old text."""
    if nonce is None:
        nonce = int(time.time() * 1000)
    query = urllib.parse.urlencode({"domain": domain, "t": nonce})
    sep = "&" if "?" in GENERATOR_URL else "?"
    return f"{GENERATOR_URL}{sep}{query}"


def parse_generated_text(body: bytes) -> str:
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise TextProviderError(f"Malformed response: {e}") from e
    text = data.get("text") if isinstance(data, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise TextProviderError("No text received")
    if not MIN_PASSAGE_CHARS <= len(text) <= MAX_PASSAGE_CHARS:
        raise TextProviderError(f"Unsuitable text length {len(text)}")
    return text


def fallback_text(domain: str) -> str:
    return FALLBACK_TEXTS[normalize_domain(domain)]


def get_practice_text(domain: str, fetch: Optional[Fetcher] = None) -> str:
    """
    One attempt at the generator; any failure yields the domain's fallback.
    Never raises.
    """
    domain = normalize_domain(domain)
    fetch = fetch or _http_get
    url = build_request_url(domain)
    try:
        return parse_generated_text(fetch(url, FETCH_TIMEOUT_SECONDS))
    except (OSError, ValueError, http.client.HTTPException, TextProviderError) as e:
        # urllib errors and socket timeouts are OSError; bad URLs are ValueError
        logger.warning("Using fallback text for %s: %s", domain, e)
        return fallback_text(domain)
