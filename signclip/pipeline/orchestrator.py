import logging
from typing import List, Optional

from signclip import settings
from signclip.nlp.fingerspell import LetterImageStore
from signclip.pipeline.resolver import Resolution, SequenceResolver
from signclip.vocab.index import VocabularyIndex

logger = logging.getLogger(__name__)

# Built once at startup, read-only afterwards
_resolver: Optional[SequenceResolver] = None


def build_resolver(
    mapping_paths: Optional[List[str]] = None,
    fingerspell_dir: Optional[str] = None,
    letter_dir: Optional[str] = None,
    base_url: Optional[str] = None,
) -> SequenceResolver:
    base_url = settings.BACKEND_URL if base_url is None else base_url
    index = VocabularyIndex.load_files(
        settings.MAPPING_PATHS if mapping_paths is None else mapping_paths,
        media_root=settings.MEDIA_ROUTE,
        base_url=base_url,
    )
    if len(index) == 0:
        logger.warning("Vocabulary is empty – every word falls back to demo clips or fingerspelling")
    letters = LetterImageStore(
        fingerspell_dir=settings.FINGERSPELL_DIR if fingerspell_dir is None else fingerspell_dir,
        letter_dir=settings.LETTER_DATASET_DIR if letter_dir is None else letter_dir,
        index=index,
        base_url=base_url,
    )
    return SequenceResolver(index, letters, partial_match=settings.PARTIAL_MATCH)


def get_resolver() -> SequenceResolver:
    global _resolver
    if _resolver is None:
        _resolver = build_resolver()
    return _resolver


def set_resolver(resolver: Optional[SequenceResolver]) -> None:
    """Swap the process-wide resolver (tests, or reloading a new artifact)."""
    global _resolver
    _resolver = resolver


def resolve_caption(words: Optional[List[str]] = None, text: Optional[str] = None) -> Resolution:
    return get_resolver().resolve(words=words, text=text)


def to_response(result: Resolution) -> dict:
    return {
        "sequence": [t.to_wire() for t in result.sequence],
        "foundWords": result.found_words,
        "notFoundWords": result.not_found_words,
    }
