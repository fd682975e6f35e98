"""In-memory gloss -> media index built from static mapping artifacts.

Two artifact encodings are in circulation and both are accepted:

    legacy   {"hello": "hello/01234.mp4"}          single relative path
    current  {"hello": ["01234.mp4", "01240.mp4"]} bare filenames, gloss is the folder

Locators are stored as written and only turned into URLs at lookup time, so
one artifact serves under any base URL.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Literal, Optional

logger = logging.getLogger(__name__)

MediaKind = Literal["video", "image"]

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp")


def media_kind(locator: str) -> MediaKind:
    path = locator.lower().split("?", 1)[0]
    return "image" if path.endswith(IMAGE_EXTENSIONS) else "video"


@dataclass(frozen=True)
class MediaRef:
    kind: MediaKind
    locator: str

    @classmethod
    def from_locator(cls, locator: str) -> "MediaRef":
        return cls(kind=media_kind(locator), locator=locator)


def _coerce_locator(value) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        for key in ("url", "path"):
            if isinstance(value.get(key), str) and value[key].strip():
                return value[key].strip()
    return None


def _parse_value(value) -> List[MediaRef]:
    if isinstance(value, str):
        candidates = [value]
    elif isinstance(value, list):
        candidates = value
    else:
        return []
    refs = []
    for item in candidates:
        locator = _coerce_locator(item)
        if locator:
            refs.append(MediaRef.from_locator(locator))
    return refs


class VocabularyIndex:
    """Read-only after construction; safe to share between requests."""

    def __init__(self, entries: Optional[Dict[str, List[MediaRef]]] = None,
                 media_root: str = "/asl-videos", base_url: str = ""):
        self._entries: Dict[str, tuple[MediaRef, ...]] = {
            k: tuple(v) for k, v in (entries or {}).items() if v
        }
        self.media_root = media_root.rstrip("/")
        self.base_url = base_url.rstrip("/")

    # ── loading ────────────────────────────────────────────────────────────

    @classmethod
    def load(cls, artifact: dict, **kwargs) -> "VocabularyIndex":
        return cls(cls._collect([artifact]), **kwargs)

    @classmethod
    def load_files(cls, paths: Iterable[str], **kwargs) -> "VocabularyIndex":
        artifacts = []
        for path in paths:
            artifact = read_artifact(path)
            if artifact is not None:
                artifacts.append(artifact)
        index = cls(cls._collect(artifacts), **kwargs)
        logger.info("Vocabulary index ready: %d glosses from %d artifact(s)",
                    len(index), len(artifacts))
        return index

    @staticmethod
    def _collect(artifacts: List[dict]) -> Dict[str, List[MediaRef]]:
        entries: Dict[str, List[MediaRef]] = {}
        skipped = 0
        for artifact in artifacts:
            if not isinstance(artifact, dict):
                logger.warning("Ignoring vocabulary artifact of type %s", type(artifact).__name__)
                continue
            for raw_key, value in artifact.items():
                key = raw_key.strip().lower() if isinstance(raw_key, str) else ""
                refs = _parse_value(value)
                if not key or not refs:
                    skipped += 1
                    continue
                entries.setdefault(key, []).extend(refs)
        if skipped:
            logger.debug("Skipped %d empty or malformed vocabulary entries", skipped)
        return entries

    # ── lookup ─────────────────────────────────────────────────────────────

    def lookup(self, gloss: str) -> Optional[List[MediaRef]]:
        refs = self._entries.get(gloss.strip().lower()) if isinstance(gloss, str) else None
        return list(refs) if refs else None

    def first(self, gloss: str) -> Optional[MediaRef]:
        refs = self.lookup(gloss)
        return refs[0] if refs else None

    def url_for(self, gloss: str, ref: MediaRef) -> str:
        loc = ref.locator
        if loc.startswith(("http://", "https://")):
            return loc
        if loc.startswith("/"):
            return f"{self.base_url}{loc}"
        loc = loc.replace("\\", "/")
        if "/" in loc:
            return f"{self.base_url}{self.media_root}/{loc}"
        return f"{self.base_url}{self.media_root}/{gloss.strip().lower()}/{loc}"

    def glosses(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, gloss) -> bool:
        return isinstance(gloss, str) and gloss.strip().lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def read_artifact(path: str) -> Optional[dict]:
    """Read one mapping artifact; a missing or broken file is not fatal."""
    if not os.path.exists(path):
        logger.warning("Vocabulary artifact not found: %s", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as e:
        logger.error("Could not read vocabulary artifact %s (%s)", path, e)
        return None
    if not isinstance(data, dict):
        logger.error("Vocabulary artifact %s is not a JSON object", path)
        return None
    logger.info("Loaded vocabulary artifact %s (%d keys)", path, len(data))
    return data
