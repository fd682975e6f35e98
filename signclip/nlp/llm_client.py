"""LLM client for caption enhancement with anti-hallucination guardrails."""

import logging
import time
from typing import List, Optional

from openai import OpenAI
from signclip import settings

logger = logging.getLogger(__name__)

_client = None

# Simple cooldown to avoid 429 rate limits: cache recent results
_llm_cache: dict[str, tuple[float, List[str]]] = {}  # key -> (timestamp, result)
_LLM_COOLDOWN = 30.0  # seconds a cached enhancement stays valid


def get_client():
    global _client
    if _client is None and settings.OPENAI_API_KEY:
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def enhance_lines(lines: List[str]) -> Optional[List[str]]:
    """Polish caption lines with the LLM, one output line per input line.

    Returns None if the API is unavailable, fails, or returns a different
    number of lines (graceful degradation to basic cleaning).
    """
    if not lines:
        return []

    cache_key = "\n".join(lines)
    now = time.perf_counter()
    if cache_key in _llm_cache:
        cached_time, cached_result = _llm_cache[cache_key]
        if now - cached_time < _LLM_COOLDOWN:
            return cached_result

    client = get_client()
    if client is None:
        logger.debug("OpenAI client not configured – using basic caption cleaning")
        return None

    system_message = (
        "You are a caption enhancement assistant for deaf and hard-of-hearing viewers. "
        "Clean and improve video captions. Rules:\n"
        "1. NEVER add information that is not in the caption\n"
        "2. Remove filler words and fix grammar\n"
        "3. Keep exactly one output line per input line, in the same order\n"
        "4. Output only the captions, no numbering or explanations"
    )

    prompt = "Enhance these captions:\n\n" + "\n".join(lines)

    try:
        t0 = time.perf_counter()
        resp = client.chat.completions.create(
            model=settings.LLM_MODEL,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": prompt}
            ],
            temperature=0.3,
        )
        llm_ms = (time.perf_counter() - t0) * 1000
        content = resp.choices[0].message.content or ""
        enhanced = [line.strip() for line in content.split("\n") if line.strip()]
        logger.info("LLM latency=%.0fms  lines=%d->%d", llm_ms, len(lines), len(enhanced))
    except Exception as e:
        logger.warning(f"LLM request failed ({e}) – using basic caption cleaning")
        return None

    if len(enhanced) != len(lines):
        logger.warning("LLM returned %d lines for %d captions – discarding", len(enhanced), len(lines))
        return None
    _llm_cache[cache_key] = (time.perf_counter(), enhanced)
    return enhanced
