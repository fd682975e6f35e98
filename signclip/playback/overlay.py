import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CaptionOverlay:
    """Text shown under the avatar: the word currently being signed.

    ``enabled`` is the user's display preference. Turning it off hides the
    text but keeps tracking the current word, so turning it back on mid-clip
    shows the right word immediately.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._word: str = ""
        self.notice: Optional[str] = None

    def show(self, word: str) -> None:
        self._word = word or ""

    def clear(self) -> None:
        self._word = ""

    @property
    def current_word(self) -> str:
        return self._word

    @property
    def visible_text(self) -> Optional[str]:
        if not self.enabled:
            return None
        if self._word:
            return self._word
        return self.notice

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)
        logger.info("Caption overlay %s", "enabled" if self.enabled else "hidden")
