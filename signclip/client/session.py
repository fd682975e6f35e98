"""Overlay session: turns incoming caption text into avatar playback.

The caption extractor calls ``handle_caption`` whenever the page's caption
text changes. The session asks the backend for a sign sequence and hands the
result to the PlaybackController. A later caption always wins: responses for
captions that have since been superseded are dropped.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import httpx

from signclip import settings
from signclip.client.preferences import Preferences, save_preferences
from signclip.pipeline.resolver import tokenize
from signclip.playback.controller import PlaybackController
from signclip.playback.types import MediaItem

logger = logging.getLogger(__name__)

RESOLVE_PATH = "/api/asl/video-map"


class OverlaySession:
    def __init__(
        self,
        controller: PlaybackController,
        preferences: Optional[Preferences] = None,
        client: Optional[httpx.AsyncClient] = None,
        preferences_path: Optional[str] = None,
    ):
        self.controller = controller
        self.preferences = preferences if preferences is not None else Preferences()
        self.preferences_path = preferences_path
        self._client = client
        self._owns_client = client is None
        self.last_caption = ""
        self._caption_seq = 0

        controller.set_enabled(self.preferences.asl_enabled)
        controller.set_captions_enabled(self.preferences.caption_enabled)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)
        return self._client

    async def handle_caption(self, text: str) -> Optional[dict]:
        """Resolve and play *text*. Returns the backend payload, or None if skipped."""
        text = (text or "").strip()
        if not text or text == self.last_caption:
            return None
        self.last_caption = text
        if not self.preferences.asl_enabled:
            return None

        words = tokenize(text)
        if not words:
            return None

        self._caption_seq += 1
        seq = self._caption_seq
        data, error = await self._request_sequence(words)
        if seq != self._caption_seq:
            logger.debug("Dropping response for superseded caption %r", text)
            return None
        if error is not None:
            self.controller.mark_unavailable(error)
            return None

        items = [MediaItem.from_wire(i) for i in data.get("sequence") or [] if i.get("url")]
        if data.get("notFoundWords"):
            logger.info("Words without signs (skipped): %s", data["notFoundWords"])
        if not items:
            logger.info("No sign media for %r", text)
        # An empty sequence still supersedes whatever the previous caption queued
        self.controller.play(items)
        return data

    async def _request_sequence(self, words: list) -> Tuple[Optional[dict], Optional[str]]:
        """POST *words* to the backend. Returns (payload, None) or (None, reason)."""
        url = f"{self.preferences.backend_url.rstrip('/')}{RESOLVE_PATH}"
        t0 = time.perf_counter()
        try:
            resp = await self._get_client().post(url, json={"words": words})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            return None, f"{type(e).__name__}: {e}"
        except ValueError as e:
            return None, f"invalid response: {e}"
        logger.debug("resolve round-trip=%.0fms", (time.perf_counter() - t0) * 1000)
        if not isinstance(data, dict) or not data.get("success"):
            return None, "unexpected response from sign service"
        return data, None

    # ── toggles ────────────────────────────────────────────────────────────

    def set_asl_enabled(self, enabled: bool) -> None:
        self.preferences.asl_enabled = bool(enabled)
        self.controller.set_enabled(enabled)
        if not enabled:
            self.last_caption = ""
        self._persist()

    def set_caption_enabled(self, enabled: bool) -> None:
        self.preferences.caption_enabled = bool(enabled)
        self.controller.set_captions_enabled(enabled)
        self._persist()

    def set_backend_url(self, url: str) -> None:
        self.preferences.backend_url = (url or settings.BACKEND_URL).rstrip("/")
        logger.info("Backend URL updated to %s", self.preferences.backend_url)
        self._persist()

    def _persist(self) -> None:
        if self.preferences_path:
            save_preferences(self.preferences, self.preferences_path)

    async def aclose(self) -> None:
        self.controller.stop()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
