"""Letter-by-letter fallback for words without a whole-word sign."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, Optional, TYPE_CHECKING

from signclip.vocab.index import IMAGE_EXTENSIONS, MediaRef

if TYPE_CHECKING:
    from signclip.vocab.index import VocabularyIndex

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_LETTER_FILE_EXTS = (".png", ".jpg", ".jpeg")


class LetterImageStore:
    """One representative image per letter/digit.

    Sources in priority order:
      1. ``<fingerspell_dir>/<ch>.png``      served under /fingerspelling/
      2. first image in ``<letter_dir>/<ch>/`` served under /asl/<ch>/
      3. a single-character image entry of the vocabulary index
    Missing directories only reduce coverage.
    """

    def __init__(self, fingerspell_dir: Optional[str] = None,
                 letter_dir: Optional[str] = None,
                 index: Optional["VocabularyIndex"] = None,
                 base_url: str = ""):
        self.base_url = base_url.rstrip("/")
        self._letters: Dict[str, MediaRef] = {}
        self._scan_letter_dataset(letter_dir)
        self._scan_fingerspell_dir(fingerspell_dir)
        if index is not None:
            self._adopt_index_letters(index)
        logger.info("Fingerspelling ready with %d characters: %s",
                    len(self._letters), "".join(sorted(self._letters)))

    @classmethod
    def from_mapping(cls, letters: Dict[str, str]) -> "LetterImageStore":
        store = cls()
        for ch, locator in letters.items():
            store._letters[ch.lower()] = MediaRef(kind="image", locator=locator)
        return store

    def _scan_fingerspell_dir(self, directory: Optional[str]) -> None:
        if not directory:
            return
        if not os.path.isdir(directory):
            logger.warning("Fingerspelling directory not found: %s", directory)
            return
        for filename in os.listdir(directory):
            stem, ext = os.path.splitext(filename)
            stem = stem.lower()
            if len(stem) == 1 and stem.isalnum() and ext.lower() in _LETTER_FILE_EXTS:
                # Overrides the letter-dataset image for the same character
                self._letters[stem] = MediaRef(kind="image", locator=f"/fingerspelling/{filename}")

    def _scan_letter_dataset(self, directory: Optional[str]) -> None:
        if not directory:
            return
        if not os.path.isdir(directory):
            logger.warning("Letter dataset directory not found: %s", directory)
            return
        for name in os.listdir(directory):
            folder = os.path.join(directory, name)
            ch = name.lower()
            if len(ch) != 1 or not ch.isalnum() or not os.path.isdir(folder):
                continue
            try:
                images = sorted(f for f in os.listdir(folder) if f.lower().endswith(IMAGE_EXTENSIONS))
            except OSError as e:
                logger.warning("Cannot list letter folder %s (%s)", folder, e)
                continue
            if images:
                self._letters[ch] = MediaRef(kind="image", locator=f"/asl/{name}/{images[0]}")

    def _adopt_index_letters(self, index: "VocabularyIndex") -> None:
        for gloss in index.glosses():
            if len(gloss) != 1 or not gloss.isalnum() or gloss in self._letters:
                continue
            ref = next((r for r in index.lookup(gloss) if r.kind == "image"), None)
            if ref is not None:
                self._letters[gloss] = MediaRef(kind="image", locator=index.url_for(gloss, ref))

    def find(self, ch: str) -> Optional[MediaRef]:
        return self._letters.get(ch.lower())

    def url_for(self, ref: MediaRef) -> str:
        if ref.locator.startswith(("http://", "https://")):
            return ref.locator
        return f"{self.base_url}{ref.locator}"

    def available_letters(self) -> List[str]:
        return sorted(self._letters)

    def __len__(self) -> int:
        return len(self._letters)

    def spell_out(self, word) -> List[MediaRef]:
        """Images for each character of *word* that has art; others are omitted."""
        if not word or not isinstance(word, str):
            return []
        refs = []
        for ch in _NON_ALNUM_RE.sub("", word.lower()):
            ref = self.find(ch)
            if ref is None:
                logger.debug("No fingerspelling image for %r", ch)
                continue
            refs.append(ref)
        return refs
