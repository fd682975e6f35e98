"""Caption enhancement: basic cleanup with optional LLM polish."""

import logging
import re
import time
from typing import List, Union

from signclip.nlp.llm_client import enhance_lines

logger = logging.getLogger(__name__)

# Seconds assigned to captions that arrive without timing
DEFAULT_CAPTION_SECONDS = 3.0

_SOUND_TAG_RE = re.compile(r"\[.*?\]")       # [music], [applause]
_PAREN_TAG_RE = re.compile(r"\(.*?\)")       # (laughter)
_SPACES_RE = re.compile(r"\s+")


def clean_caption(text: str) -> str:
    cleaned = _SPACES_RE.sub(" ", text or "")
    cleaned = _PAREN_TAG_RE.sub("", _SOUND_TAG_RE.sub("", cleaned))
    cleaned = _SPACES_RE.sub(" ", cleaned).strip()
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned


def _caption_fields(caption: Union[str, dict], index: int) -> tuple[str, float, float]:
    if isinstance(caption, str):
        text, start, end = caption, None, None
    else:
        text, start, end = caption.get("text") or "", caption.get("start"), caption.get("end")
    if start is None:
        start = index * DEFAULT_CAPTION_SECONDS
    if end is None:
        end = start + DEFAULT_CAPTION_SECONDS
    return text, float(start), float(end)


def enhance_captions(captions: List[Union[str, dict]]) -> dict:
    """Clean captions, then let the LLM polish them when it is configured.

    Timing is preserved from the input when present; otherwise each caption
    gets a fixed slot. Returns ``{"captions": [...], "mode": "basic"|"llm"}``.
    """
    t0 = time.perf_counter()
    parsed = [_caption_fields(c, i) for i, c in enumerate(captions)]
    enhanced = [
        {"text": clean_caption(text), "start": start, "end": end, "original": text}
        for text, start, end in parsed
    ]

    mode = "basic"
    polished = enhance_lines([e["text"] for e in enhanced if e["text"]])
    if polished:
        it = iter(polished)
        for entry in enhanced:
            if entry["text"]:
                entry["text"] = next(it)
        mode = "llm"

    logger.info("enhance latency=%.1fms  captions=%d  mode=%s",
                (time.perf_counter() - t0) * 1000, len(enhanced), mode)
    return {"captions": enhanced, "mode": mode}
