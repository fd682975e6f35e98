"""Resolve caption text into an ordered sequence of playable sign media.

Each word walks a strict fallback chain and stops at the first tier that
yields media:

    word-level dataset -> demo fallback clips -> fingerspelling

A looser substring ("partial-match") tier is tried only when the whole
caption resolved to nothing.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Sequence

from signclip.nlp.fingerspell import LetterImageStore
from signclip.nlp.gloss import clean, normalize
from signclip.vocab.demo import DEMO_CLIPS
from signclip.vocab.index import MediaKind, VocabularyIndex, media_kind

logger = logging.getLogger(__name__)

MatchSource = Literal[
    "word-level-dataset", "demo-fallback-database", "fingerspell", "partial-match", "none",
]

_NON_WORD_RE = re.compile(r"[^\w\s]")


@dataclass(frozen=True)
class ResolvedToken:
    source_word: str
    gloss: str
    media_type: MediaKind
    url: str
    match_source: MatchSource

    def to_wire(self) -> dict:
        return {
            "type": self.media_type,
            "url": self.url,
            "word": self.source_word,
            "gloss": self.gloss,
            "source": self.match_source,
        }


@dataclass
class Resolution:
    sequence: List[ResolvedToken] = field(default_factory=list)
    found_words: List[str] = field(default_factory=list)
    not_found_words: List[str] = field(default_factory=list)
    words: List[str] = field(default_factory=list)

    @property
    def sources(self) -> List[str]:
        return list(dict.fromkeys(t.match_source for t in self.sequence))


def tokenize(text: str) -> List[str]:
    """Lowercase, collapse contractions, split on anything that isn't a word char."""
    if not text:
        return []
    cleaned = _NON_WORD_RE.sub(" ", text.lower().replace("'", ""))
    return cleaned.split()


class SequenceResolver:
    def __init__(self, index: VocabularyIndex, letters: Optional[LetterImageStore] = None,
                 demo_clips: Optional[Dict[str, str]] = None, partial_match: bool = True):
        self.index = index
        self.letters = letters if letters is not None else LetterImageStore()
        self.demo_clips = DEMO_CLIPS if demo_clips is None else demo_clips
        self.partial_match = partial_match

    def resolve(self, words: Optional[Sequence[str]] = None, text: Optional[str] = None) -> Resolution:
        t0 = time.perf_counter()
        if words is None:
            words = tokenize(text or "")
        result = Resolution(words=[w for w in words if isinstance(w, str)])

        unresolved: List[tuple[str, str]] = []
        for word in result.words:
            gloss = normalize(word)
            if gloss is None:
                continue
            items = self._resolve_word(word, gloss)
            if items:
                result.sequence.extend(items)
                result.found_words.append(gloss)
            else:
                result.not_found_words.append(gloss)
                unresolved.append((word, gloss))

        if not result.sequence and unresolved and self.partial_match:
            self._apply_partial_matches(result, unresolved)

        logger.info(
            "resolve latency=%.1fms  words=%d  items=%d  found=%d  missing=%d",
            (time.perf_counter() - t0) * 1000, len(result.words), len(result.sequence),
            len(result.found_words), len(result.not_found_words),
        )
        return result

    def _resolve_word(self, word: str, gloss: str) -> List[ResolvedToken]:
        ref = self.index.first(gloss)
        if ref is not None:
            return [ResolvedToken(word, gloss, ref.kind, self.index.url_for(gloss, ref),
                                  "word-level-dataset")]

        literal = word.strip().lower()
        demo_url = self.demo_clips.get(literal)
        if demo_url:
            return [ResolvedToken(word, gloss, media_kind(demo_url), demo_url,
                                  "demo-fallback-database")]

        letters = self.letters.spell_out(clean(word))
        if letters:
            logger.debug("Fingerspelling %r with %d letter(s)", word, len(letters))
        return [
            ResolvedToken(word, gloss, "image", self.letters.url_for(ref), "fingerspell")
            for ref in letters
        ]

    def _apply_partial_matches(self, result: Resolution, unresolved: List[tuple[str, str]]) -> None:
        # TODO: restrict to whole-morpheme matches; short glosses like "an" hit far too many keys.
        matched: List[str] = []
        for word, gloss in unresolved:
            key = self._partial_key(gloss)
            if key is None:
                continue
            ref = self.index.first(key)
            result.sequence.append(
                ResolvedToken(word, key, ref.kind, self.index.url_for(key, ref), "partial-match")
            )
            result.found_words.append(gloss)
            matched.append(gloss)
        for gloss in matched:
            result.not_found_words.remove(gloss)
        if matched:
            logger.info("Using %d partial match(es) for %s", len(matched), matched)

    def _partial_key(self, gloss: str) -> Optional[str]:
        for key in self.index.glosses():
            if len(key) > 1 and (key in gloss or gloss in key):
                return key
        return None
