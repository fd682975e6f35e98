"""Curated fallback clips for common words missing from the main dataset.

Keyed by the literal lowercase word (not the gloss). Consulted only after the
word-level dataset misses.
"""

_SAMPLES = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample"

DEMO_CLIPS = {
    "hello": f"{_SAMPLES}/BigBuckBunny.mp4",
    "hi": f"{_SAMPLES}/BigBuckBunny.mp4",
    "thank": f"{_SAMPLES}/ElephantsDream.mp4",
    "you": f"{_SAMPLES}/ForBiggerBlazes.mp4",
    "welcome": f"{_SAMPLES}/ForBiggerEscapes.mp4",
    "please": f"{_SAMPLES}/ForBiggerFun.mp4",
    "yes": f"{_SAMPLES}/ForBiggerJoyrides.mp4",
    "no": f"{_SAMPLES}/ForBiggerMeltdowns.mp4",
    "video": f"{_SAMPLES}/WhatCarCanYouGetForAGrand.mp4",
    "how": f"{_SAMPLES}/BigBuckBunny.mp4",
    "what": f"{_SAMPLES}/ForBiggerBlazes.mp4",
    "where": f"{_SAMPLES}/ForBiggerEscapes.mp4",
    "when": f"{_SAMPLES}/ForBiggerFun.mp4",
    "why": f"{_SAMPLES}/ForBiggerJoyrides.mp4",
    "who": f"{_SAMPLES}/ForBiggerMeltdowns.mp4",
}
