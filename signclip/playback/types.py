from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

MediaKind = Literal["video", "image"]


class PlaybackState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    TRANSITIONING = "transitioning"


@dataclass(frozen=True)
class MediaItem:
    """One playable entry of a sequence: a word clip or a fingerspelled letter."""
    kind: MediaKind
    url: str
    word: str = ""
    gloss: str = ""

    @classmethod
    def from_wire(cls, data: dict) -> "MediaItem":
        kind = data.get("type") or "video"
        return cls(
            kind="image" if kind == "image" else "video",
            url=data["url"],
            word=data.get("word") or data.get("gloss") or "",
            gloss=data.get("gloss") or data.get("word") or "",
        )


# ── Media fetch failures ──────────────────────────────────────────────────

class MediaFetchError(Exception):
    """Fetching media bytes failed; the item is skipped, never fatal."""

    def __init__(self, url: str, reason: str = ""):
        super().__init__(f"{url}: {reason}" if reason else url)
        self.url = url
        self.reason = reason


class MediaNotFound(MediaFetchError):
    pass


class MediaTimeout(MediaFetchError):
    pass


class MediaUnreachable(MediaFetchError):
    pass


class MediaLoadError(Exception):
    """The surface could not decode or play a payload."""


# ── Collaborators ─────────────────────────────────────────────────────────

class MediaFetcher(Protocol):
    async def fetch(self, url: str) -> bytes: ...


class MediaSurface(Protocol):
    """Where the avatar renders.

    ``show_image`` / ``load_video`` return once the payload is ready to be
    displayed and raise MediaLoadError when it cannot be. ``play_video``
    returns when playback reaches its natural end. ``clear`` must stop any
    media synchronously.
    """

    async def show_image(self, item: MediaItem, payload: bytes) -> None: ...

    async def load_video(self, item: MediaItem, payload: bytes) -> None: ...

    async def play_video(self, item: MediaItem) -> None: ...

    def clear(self) -> None: ...
