#!/usr/bin/env python3
"""Tests for the vocabulary index and the fingerspelling letter store.

Run:  python -m pytest test_vocab.py
"""

import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from signclip.nlp.fingerspell import LetterImageStore
from signclip.vocab.index import MediaRef, VocabularyIndex, media_kind

BASE = "http://localhost:3000"


def _index(artifact):
    return VocabularyIndex.load(artifact, media_root="/asl-videos", base_url=BASE)


# ── VocabularyIndex ───────────────────────────────────────────────────────

def test_current_format_prefixes_gloss_folder():
    index = _index({"hello": ["00001.mp4", "00002.mp4"]})
    refs = index.lookup("hello")
    assert [r.locator for r in refs] == ["00001.mp4", "00002.mp4"]
    assert index.url_for("hello", refs[0]) == f"{BASE}/asl-videos/hello/00001.mp4"


def test_legacy_format_path_used_as_is():
    index = _index({"book": "book/07069.mp4", "go": "/asl-videos/go/1.mp4"})
    assert index.url_for("book", index.first("book")) == f"{BASE}/asl-videos/book/07069.mp4"
    assert index.url_for("go", index.first("go")) == f"{BASE}/asl-videos/go/1.mp4"


def test_absolute_urls_and_object_entries():
    index = _index({
        "cat": "https://cdn.example.org/cat.mp4",
        "dog": [{"url": "/asl-videos/dog/d.jpeg"}, {"path": "dog/2.mp4"}],
    })
    assert index.url_for("cat", index.first("cat")) == "https://cdn.example.org/cat.mp4"
    dog = index.lookup("dog")
    assert dog[0].kind == "image"
    assert dog[1] == MediaRef(kind="video", locator="dog/2.mp4")


def test_every_loaded_key_resolves_and_malformed_are_skipped():
    artifact = {
        " Hello ": ["a.mp4"],
        "empty": "",
        "nothing": [],
        "null": None,
        "number": 5,
        "mixed": ["", None, "m.mp4"],
        "legacy": "legacy/x.mp4",
    }
    index = _index(artifact)
    assert set(index.glosses()) == {"hello", "mixed", "legacy"}
    for gloss in index.glosses():
        refs = index.lookup(gloss)
        assert refs, gloss
    assert "HELLO" in index
    assert index.lookup("empty") is None
    assert index.lookup("missing") is None


def test_first_listed_clip_wins():
    index = _index({"run": ["1.mp4", "2.mp4", "3.mp4"]})
    for _ in range(5):
        assert index.first("run").locator == "1.mp4"


def test_load_files_merges_in_order_and_tolerates_missing(tmp_path):
    current = tmp_path / "mapping.json"
    current.write_text(json.dumps({"hello": ["c.mp4"], "yes": ["y.mp4"]}))
    legacy = tmp_path / "asl-word-mapping.json"
    legacy.write_text(json.dumps({"hello": "hello/l.mp4", "no": "no/n.mp4"}))
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")

    index = VocabularyIndex.load_files(
        [str(current), str(tmp_path / "absent.json"), str(broken), str(legacy)],
        base_url=BASE,
    )
    assert len(index) == 3
    assert [r.locator for r in index.lookup("hello")] == ["c.mp4", "hello/l.mp4"]


def test_missing_artifact_gives_empty_index(tmp_path):
    index = VocabularyIndex.load_files([str(tmp_path / "nope.json")])
    assert len(index) == 0
    assert index.lookup("hello") is None


def test_media_kind_from_extension():
    assert media_kind("a/B.JPG") == "image"
    assert media_kind("x.png?v=2") == "image"
    assert media_kind("clip.mp4") == "video"
    assert media_kind("clip.webm") == "video"


# ── LetterImageStore ──────────────────────────────────────────────────────

def test_letter_store_scans_both_directories(tmp_path):
    spell_dir = tmp_path / "fingerspelling"
    spell_dir.mkdir()
    (spell_dir / "a.png").write_bytes(b"")
    (spell_dir / "notes.txt").write_text("ignore me")
    letters_dir = tmp_path / "asl_dataset"
    for ch, files in {"a": ["z.jpeg"], "b": ["hand2.jpg", "hand1.jpeg"], "hello": ["x.jpg"]}.items():
        (letters_dir / ch).mkdir(parents=True)
        for f in files:
            (letters_dir / ch / f).write_bytes(b"")
    (letters_dir / "c").mkdir()

    store = LetterImageStore(str(spell_dir), str(letters_dir), base_url=BASE)
    assert store.available_letters() == ["a", "b"]
    assert store.find("a").locator == "/fingerspelling/a.png"
    assert store.find("B").locator == "/asl/b/hand1.jpeg"
    assert store.url_for(store.find("b")) == f"{BASE}/asl/b/hand1.jpeg"


def test_letter_store_missing_dirs_are_not_fatal(tmp_path):
    store = LetterImageStore(str(tmp_path / "x"), str(tmp_path / "y"))
    assert len(store) == 0
    assert store.spell_out("abc") == []


def test_letter_store_adopts_single_char_index_images():
    index = _index({"q": ["q1.jpeg"], "r": ["r.mp4"], "hello": ["h.mp4"]})
    store = LetterImageStore(index=index)
    assert store.available_letters() == ["q"]
    assert store.url_for(store.find("q")) == f"{BASE}/asl-videos/q/q1.jpeg"


def test_spell_out_skips_letters_without_art():
    store = LetterImageStore.from_mapping({"x": "/fingerspelling/x.png", "z": "/fingerspelling/z.png"})
    refs = store.spell_out("xyz")
    assert [r.locator for r in refs] == ["/fingerspelling/x.png", "/fingerspelling/z.png"]
    assert all(r.kind == "image" for r in refs)
    assert store.spell_out("X-Z!") == refs
    assert store.spell_out("yyy") == []
    assert store.spell_out("") == []
