"""Map English words to sign-vocabulary glosses.

Precedence is fixed: stop words drop first, then the explicit word-form
table, then suffix stripping (only for pairings the table registers), and
finally the cleaned word itself as a literal gloss candidate.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from signclip.nlp.word_forms import STOP_WORDS, WORD_FORMS

_PUNCT_RE = re.compile(r"[^\w\s']")

# (suffix, minimum length of the whole word before stripping applies)
_SUFFIX_RULES = (("s", 3), ("ing", 4), ("ed", 3))


def clean(word: str) -> str:
    """Lowercase, trim and drop punctuation; apostrophes collapse contractions."""
    cleaned = _PUNCT_RE.sub("", word.lower().strip())
    return cleaned.replace("'", "")


def normalize(word) -> Optional[str]:
    """Return the gloss for *word*, or None when it should be dropped."""
    if not word or not isinstance(word, str):
        return None

    token = clean(word)
    if not token or token in STOP_WORDS:
        return None

    mapped = WORD_FORMS.get(token)
    if mapped:
        return mapped

    for suffix, min_len in _SUFFIX_RULES:
        if token.endswith(suffix) and len(token) > min_len:
            base = token[: -len(suffix)]
            # Only trust the strip when the table registers this exact pairing,
            # otherwise "this" would become "thi".
            if WORD_FORMS.get(base + suffix) == base:
                return base

    return token


def normalize_all(words: Iterable) -> List[str]:
    """Normalize many words; unique glosses in first-seen order."""
    if words is None or isinstance(words, str):
        return []
    seen: dict[str, None] = {}
    for word in words:
        gloss = normalize(word)
        if gloss:
            seen.setdefault(gloss, None)
    return list(seen)


def is_stop_word(word: str) -> bool:
    return isinstance(word, str) and clean(word) in STOP_WORDS
