#!/usr/bin/env python3
"""Tests for the sequential playback controller.

The real avatar surface and media proxy are replaced with in-memory fakes
that record what was shown, so the state machine runs without a browser.

Run:  python test_playback.py   (or pytest)
"""

import asyncio
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from signclip.playback.controller import UNAVAILABLE_NOTICE, PlaybackController
from signclip.playback.overlay import CaptionOverlay
from signclip.playback.types import MediaItem, MediaLoadError, MediaNotFound, PlaybackState


# ── fakes ─────────────────────────────────────────────────────────────────

class FakeFetcher:
    def __init__(self, fail=(), fail_once=(), hang=()):
        self.fail = set(fail)
        self.fail_once = set(fail_once)
        self.hang = set(hang)
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        await asyncio.sleep(0)
        if url in self.hang:
            await asyncio.Event().wait()
        if url in self.fail:
            raise MediaNotFound(url, "404")
        if url in self.fail_once:
            self.fail_once.discard(url)
            raise MediaNotFound(url, "404")
        return url.encode()


class FakeSurface:
    def __init__(self, video_seconds=0.02, broken_playback=()):
        self.video_seconds = video_seconds
        self.broken_playback = set(broken_playback)
        self.events = []

    async def show_image(self, item, payload):
        assert payload == item.url.encode()
        self.events.append(("image", item.url))

    async def load_video(self, item, payload):
        assert payload == item.url.encode()
        self.events.append(("load", item.url))

    async def play_video(self, item):
        self.events.append(("play", item.url))
        if item.url in self.broken_playback:
            raise MediaLoadError("decode error")
        await asyncio.sleep(self.video_seconds)
        self.events.append(("ended", item.url))

    def clear(self):
        self.events.append(("clear", None))

    def shown(self):
        return [url for kind, url in self.events if kind in ("image", "play")]


def video(name, word=None):
    return MediaItem(kind="video", url=f"http://media/{name}.mp4", word=word or name, gloss=word or name)


def image(name, word):
    return MediaItem(kind="image", url=f"http://media/{name}.png", word=word, gloss=name)


def make_controller(fetcher=None, surface=None, **timings):
    opts = dict(image_display=0.01, transition_pause=0.005, image_timeout=0.5, video_timeout=0.5)
    opts.update(timings)
    return PlaybackController(fetcher or FakeFetcher(), surface or FakeSurface(), CaptionOverlay(), **opts)


async def _join(controller, timeout=3.0):
    await asyncio.wait_for(controller.join(), timeout)


# ── tests ─────────────────────────────────────────────────────────────────

def test_plays_mixed_sequence_in_order():
    async def scenario():
        surface = FakeSurface()
        controller = make_controller(surface=surface)
        states = []
        controller.on_state(lambda state, item, gen: states.append((state, item.url if item else None)))

        items = [video("hello"), image("x", "xyz"), image("z", "xyz"), video("how")]
        controller.play(items)
        assert controller.state is PlaybackState.LOADING
        await _join(controller)

        assert surface.shown() == [i.url for i in items]
        assert ("ended", items[-1].url) in surface.events
        assert controller.state is PlaybackState.IDLE
        assert controller.overlay.visible_text is None

        kinds = [s for s, _ in states]
        assert kinds[0] is PlaybackState.LOADING
        assert kinds[-1] is PlaybackState.IDLE
        # LOADING -> PLAYING -> TRANSITIONING for every item
        for item in items:
            seen = [s for s, url in states if url == item.url]
            assert seen == [PlaybackState.LOADING, PlaybackState.PLAYING, PlaybackState.TRANSITIONING]

    asyncio.run(scenario())


def test_caption_tracks_source_word():
    async def scenario():
        controller = make_controller(surface=FakeSurface(video_seconds=0.05))
        words = []
        controller.on_state(
            lambda state, item, gen: words.append(controller.overlay.visible_text)
            if state is PlaybackState.PLAYING else None
        )
        controller.play([video("run", word="running"), image("o", "ok")])
        await _join(controller)
        assert words == ["running", "ok"]

    asyncio.run(scenario())


def test_new_sequence_supersedes_old_one():
    async def scenario():
        surface = FakeSurface(video_seconds=0.3)
        controller = make_controller(surface=surface)
        old = [video("old1"), video("old2"), video("old3")]
        new = [video("new1"), image("n", "new")]

        first_gen = controller.play(old)
        await asyncio.sleep(0.05)
        assert controller.state is PlaybackState.PLAYING
        assert controller.current == old[0]

        clears_before = surface.events.count(("clear", None))
        second_gen = controller.play(new)
        assert second_gen == first_gen + 1
        # Old media is torn down synchronously, before anything new starts
        assert surface.events.count(("clear", None)) == clears_before + 1
        assert controller.state is PlaybackState.LOADING
        await _join(controller)

        assert surface.shown() == [old[0].url, new[0].url, new[1].url]
        assert ("ended", old[0].url) not in surface.events
        old_urls = {i.url for i in old}
        start_of_new = surface.events.index(("play", new[0].url))
        assert not any(url in old_urls for _, url in surface.events[start_of_new:])

    asyncio.run(scenario())


def test_rapid_captions_only_last_sequence_plays():
    async def scenario():
        surface = FakeSurface()
        controller = make_controller(surface=surface)
        for n in range(5):
            controller.play([video(f"c{n}a"), video(f"c{n}b")])
        await _join(controller)
        assert surface.shown() == ["http://media/c4a.mp4", "http://media/c4b.mp4"]

    asyncio.run(scenario())


def test_load_that_never_resolves_times_out_and_advances():
    async def scenario():
        fetcher = FakeFetcher(hang={"http://media/stuck.mp4"})
        surface = FakeSurface()
        controller = make_controller(fetcher, surface, video_timeout=0.05)
        controller.play([video("stuck"), video("after")])
        await _join(controller, timeout=2.0)
        assert surface.shown() == ["http://media/after.mp4"]
        assert controller.state is PlaybackState.IDLE

    asyncio.run(scenario())


def test_fetch_failure_is_skipped_not_fatal():
    async def scenario():
        fetcher = FakeFetcher(fail={"http://media/missing.mp4"})
        surface = FakeSurface()
        controller = make_controller(fetcher, surface)
        states = []
        controller.on_state(lambda state, item, gen: states.append((state, item)))
        controller.play([video("missing"), image("a", "a")])
        await _join(controller)

        assert surface.shown() == ["http://media/a.png"]
        missing = [s for s, item in states if item is not None and item.url.endswith("missing.mp4")]
        assert missing == [PlaybackState.LOADING, PlaybackState.TRANSITIONING]

    asyncio.run(scenario())


def test_video_playback_error_advances_without_retry():
    async def scenario():
        surface = FakeSurface(broken_playback={"http://media/bad.mp4"})
        controller = make_controller(surface=surface)
        controller.play([video("bad"), video("good")])
        await _join(controller)
        assert surface.shown() == ["http://media/bad.mp4", "http://media/good.mp4"]
        assert surface.events.count(("play", "http://media/bad.mp4")) == 1

    asyncio.run(scenario())


def test_preloaded_payload_is_used_once_per_item():
    async def scenario():
        fetcher = FakeFetcher()
        controller = make_controller(fetcher, surface=FakeSurface(video_seconds=0.05))
        items = [video("a"), video("b"), video("a"), image("c", "c")]
        controller.play(items)
        await _join(controller)
        # One fetch per queue position: preloads are consumed, never reused
        assert sorted(fetcher.calls) == sorted(i.url for i in items)

    asyncio.run(scenario())


def test_failed_preload_falls_back_to_fresh_fetch():
    async def scenario():
        fetcher = FakeFetcher(fail_once={"http://media/b.mp4"})
        surface = FakeSurface(video_seconds=0.05)
        controller = make_controller(fetcher, surface)
        controller.play([video("a"), video("b")])
        await _join(controller)
        assert fetcher.calls.count("http://media/b.mp4") == 2
        assert surface.shown() == ["http://media/a.mp4", "http://media/b.mp4"]

    asyncio.run(scenario())


def test_caption_toggle_does_not_touch_queue():
    async def scenario():
        controller = make_controller(surface=FakeSurface(video_seconds=0.2))
        controller.play([video("one"), video("two")])
        await asyncio.sleep(0.05)
        assert controller.overlay.visible_text == "one"

        controller.set_captions_enabled(False)
        assert controller.overlay.visible_text is None
        assert controller.state is PlaybackState.PLAYING
        assert controller.remaining == 1

        controller.set_captions_enabled(True)
        assert controller.overlay.visible_text == "one"
        await _join(controller)

    asyncio.run(scenario())


def test_disabling_avatar_is_an_explicit_stop():
    async def scenario():
        surface = FakeSurface(video_seconds=0.2)
        controller = make_controller(surface=surface)
        controller.play([video("one"), video("two")])
        await asyncio.sleep(0.05)

        controller.set_enabled(False)
        assert controller.state is PlaybackState.IDLE
        assert controller.remaining == 0
        await _join(controller)

        controller.play([video("three")])
        await _join(controller)
        assert surface.shown() == ["http://media/one.mp4"]

        controller.set_enabled(True)
        controller.play([video("four")])
        await _join(controller)
        assert surface.shown()[-1] == "http://media/four.mp4"

    asyncio.run(scenario())


def test_unavailable_notice_is_visible_and_cleared_by_next_sequence():
    async def scenario():
        controller = make_controller()
        controller.mark_unavailable("ConnectError: refused")
        assert controller.overlay.visible_text == UNAVAILABLE_NOTICE
        assert controller.snapshot()["unavailable"] == "ConnectError: refused"
        assert controller.state is PlaybackState.IDLE

        controller.play([video("hello")])
        assert controller.unavailable is None
        await _join(controller)
        assert controller.overlay.visible_text is None

    asyncio.run(scenario())


def test_empty_sequence_stops_playback():
    async def scenario():
        surface = FakeSurface(video_seconds=0.2)
        controller = make_controller(surface=surface)
        controller.play([video("one")])
        await asyncio.sleep(0.05)
        controller.play([])
        assert controller.state is PlaybackState.IDLE
        await _join(controller)
        assert ("ended", "http://media/one.mp4") not in surface.events

    asyncio.run(scenario())


def test_images_are_held_and_separated_by_pause():
    async def scenario():
        surface = FakeSurface()
        controller = make_controller(surface=surface, image_display=0.2, transition_pause=0.1)
        t0 = time.perf_counter()
        controller.play([image("a", "ab"), image("b", "ab")])
        await _join(controller)
        elapsed = time.perf_counter() - t0
        # 2 x display + 1 pause; no pause after the last item
        assert elapsed >= 0.48, elapsed
        assert elapsed < 1.5, elapsed
        assert surface.shown() == ["http://media/a.png", "http://media/b.png"]

    asyncio.run(scenario())


def test_image_load_uses_image_timeout():
    async def scenario():
        fetcher = FakeFetcher(hang={"http://media/stuck.png"})
        surface = FakeSurface()
        controller = make_controller(fetcher, surface, image_timeout=0.1, video_timeout=5.0)
        t0 = time.perf_counter()
        controller.play([image("stuck", "st"), image("next", "nx")])
        await _join(controller, timeout=2.0)
        elapsed = time.perf_counter() - t0
        assert 0.09 <= elapsed < 1.0, elapsed
        assert surface.shown() == ["http://media/next.png"]

    asyncio.run(scenario())


if __name__ == "__main__":
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"  ✓ {name}")
    print("\n✓ All playback tests passed!")
