"""Sequential playback of resolved sign media.

State machine
-------------
    IDLE --play--> LOADING --ready--> PLAYING --ended/held--> TRANSITIONING
    LOADING --error/timeout--> TRANSITIONING
    TRANSITIONING --queue left--> LOADING      TRANSITIONING --drained--> IDLE
    any --play(new)--> LOADING(first of new)   any --stop--> IDLE

Every ``play`` bumps ``generation``. The running task captures the generation
it was started under and re-checks it after each await, so completions from a
superseded sequence never touch the new queue.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional

from signclip import settings
from signclip.playback.overlay import CaptionOverlay
from signclip.playback.types import (
    MediaFetchError,
    MediaFetcher,
    MediaItem,
    MediaLoadError,
    MediaSurface,
    PlaybackState,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[PlaybackState, Optional[MediaItem], int], None]

UNAVAILABLE_NOTICE = "Sign language service unavailable"


@dataclass
class _Preload:
    generation: int
    position: int
    url: str
    task: asyncio.Task


class PlaybackController:
    def __init__(
        self,
        fetcher: MediaFetcher,
        surface: MediaSurface,
        overlay: Optional[CaptionOverlay] = None,
        *,
        image_display: float = settings.IMAGE_DISPLAY_SECONDS,
        transition_pause: float = settings.TRANSITION_PAUSE_SECONDS,
        image_timeout: float = settings.IMAGE_LOAD_TIMEOUT,
        video_timeout: float = settings.VIDEO_LOAD_TIMEOUT,
    ):
        self.fetcher = fetcher
        self.surface = surface
        self.overlay = overlay if overlay is not None else CaptionOverlay()
        self.image_display = image_display
        self.transition_pause = transition_pause
        self.image_timeout = image_timeout
        self.video_timeout = video_timeout

        self.state = PlaybackState.IDLE
        self.generation = 0
        self.enabled = True
        self.unavailable: Optional[str] = None
        self.current: Optional[MediaItem] = None

        self._queue: Deque[MediaItem] = deque()
        self._position = 0
        self._task: Optional[asyncio.Task] = None
        self._preload: Optional[_Preload] = None
        self._listeners: List[StateListener] = []

    # ── public API ─────────────────────────────────────────────────────────

    def on_state(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def play(self, items: Iterable[MediaItem]) -> int:
        """Replace whatever is playing with *items*; returns the new generation.

        Must be called from inside the running event loop.
        """
        self._teardown()
        self.generation += 1
        gen = self.generation
        items = list(items)

        if not self.enabled:
            logger.debug("Avatar disabled – ignoring sequence of %d item(s)", len(items))
            self._set_state(PlaybackState.IDLE, None)
            return gen
        if not items:
            self._set_state(PlaybackState.IDLE, None)
            return gen

        self.clear_unavailable()
        self._queue = deque(items)
        self._position = 0
        logger.info("gen=%d  queued %d item(s): %s", gen, len(items),
                    " ".join(i.word or i.gloss for i in items))
        self._set_state(PlaybackState.LOADING, items[0])
        self._task = asyncio.get_running_loop().create_task(self._run(gen))
        return gen

    def stop(self) -> None:
        self._teardown()
        self.generation += 1
        self._set_state(PlaybackState.IDLE, None)
        logger.info("Stopped sign sequence")

    async def join(self) -> None:
        """Wait until the current sequence (and any that supersede it) finishes."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)
        if not self.enabled:
            self.stop()
        logger.info("Avatar playback %s", "enabled" if self.enabled else "disabled")

    def set_captions_enabled(self, enabled: bool) -> None:
        self.overlay.set_enabled(enabled)

    def mark_unavailable(self, reason: str) -> None:
        self.unavailable = reason
        self.overlay.notice = UNAVAILABLE_NOTICE
        logger.warning("Sign service unavailable: %s", reason)

    def clear_unavailable(self) -> None:
        self.unavailable = None
        self.overlay.notice = None

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "generation": self.generation,
            "word": self.current.word if self.current else None,
            "remaining": len(self._queue),
            "caption": self.overlay.visible_text,
            "unavailable": self.unavailable,
        }

    # ── internals ──────────────────────────────────────────────────────────

    def _is_current(self, gen: int) -> bool:
        return gen == self.generation

    def _set_state(self, state: PlaybackState, item: Optional[MediaItem]) -> None:
        self.state = state
        self.current = item if state is not PlaybackState.IDLE else None
        for listener in list(self._listeners):
            try:
                listener(state, item, self.generation)
            except Exception:
                logger.exception("State listener failed")

    def _teardown(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._cancel_preload()
        self._queue = deque()
        self.surface.clear()
        self.overlay.clear()

    async def _run(self, gen: int) -> None:
        while self._is_current(gen) and self._queue:
            item = self._queue.popleft()
            position = self._position
            self._position += 1

            if position > 0:
                self._set_state(PlaybackState.LOADING, item)
            self.overlay.show(item.word)
            preload = self._take_preload(gen, position, item.url)
            if self._queue:
                self._start_preload(gen, position + 1, self._queue[0])

            try:
                played = await self._play_item(gen, item, preload)
            except Exception:
                # One broken item must not end the sequence
                logger.exception("gen=%d  unexpected error on %s – skipping", gen, item.url)
                played = False
            if not self._is_current(gen):
                return
            if not played:
                self.overlay.clear()

            self._set_state(PlaybackState.TRANSITIONING, item)
            if self._queue:
                # movement between signs
                await asyncio.sleep(self.transition_pause)

        if self._is_current(gen):
            self.overlay.clear()
            self.surface.clear()
            self._set_state(PlaybackState.IDLE, None)
            logger.info("gen=%d  queue finished", gen)

    async def _play_item(self, gen: int, item: MediaItem, preload: Optional[asyncio.Task]) -> bool:
        timeout = self.image_timeout if item.kind == "image" else self.video_timeout
        try:
            await asyncio.wait_for(self._load(gen, item, preload), timeout)
        except asyncio.TimeoutError:
            logger.warning("gen=%d  %s load timed out after %.1fs – skipping", gen, item.kind, timeout)
            return False
        except (MediaFetchError, MediaLoadError) as e:
            logger.warning("gen=%d  could not load %s (%s) – skipping", gen, item.url, e)
            return False

        if not self._is_current(gen):
            return False
        self._set_state(PlaybackState.PLAYING, item)

        if item.kind == "image":
            await asyncio.sleep(self.image_display)
        else:
            try:
                await self.surface.play_video(item)
            except MediaLoadError as e:
                logger.warning("gen=%d  playback error on %s (%s) – advancing", gen, item.url, e)
        return True

    async def _load(self, gen: int, item: MediaItem, preload: Optional[asyncio.Task]) -> None:
        payload = await self._obtain(gen, item, preload)
        if not self._is_current(gen):
            return
        if item.kind == "image":
            await self.surface.show_image(item, payload)
        else:
            await self.surface.load_video(item, payload)

    async def _obtain(self, gen: int, item: MediaItem, preload: Optional[asyncio.Task]) -> bytes:
        if preload is not None:
            try:
                payload = await preload
                logger.debug("gen=%d  using preloaded %s", gen, item.url)
                return payload
            except Exception as e:
                logger.info("gen=%d  preload of %s failed (%s) – fetching again", gen, item.url, e)
        return await self.fetcher.fetch(item.url)

    def _start_preload(self, gen: int, position: int, item: MediaItem) -> None:
        self._cancel_preload()
        task = asyncio.get_running_loop().create_task(self.fetcher.fetch(item.url))
        task.add_done_callback(_log_preload_outcome)
        self._preload = _Preload(gen, position, item.url, task)

    def _take_preload(self, gen: int, position: int, url: str) -> Optional[asyncio.Task]:
        pre = self._preload
        if pre is None:
            return None
        self._preload = None
        if (pre.generation, pre.position, pre.url) == (gen, position, url):
            return pre.task
        pre.task.cancel()
        return None

    def _cancel_preload(self) -> None:
        if self._preload is not None:
            self._preload.task.cancel()
            self._preload = None


def _log_preload_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Preload failed: %s", exc)
