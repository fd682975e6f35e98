import os
from dotenv import load_dotenv

load_dotenv()

_HERE = os.path.dirname(os.path.abspath(__file__))

PORT = int(os.getenv("PORT", "3000"))
BACKEND_URL = os.getenv("BACKEND_URL", f"http://localhost:{PORT}").rstrip("/")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Datasets ──────────────────────────────────────────────────────────────
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.path.dirname(_HERE), "data"))
# Comma-separated list; earlier files win when a gloss appears in several.
MAPPING_PATHS = [
    p.strip()
    for p in os.getenv(
        "MAPPING_PATHS",
        ",".join([
            os.path.join(DATA_DIR, "mapping.json"),
            os.path.join(DATA_DIR, "asl-word-mapping.json"),
        ]),
    ).split(",")
    if p.strip()
]
MEDIA_DIR = os.getenv("MEDIA_DIR", os.path.join(DATA_DIR, "asl_dataset"))
MEDIA_ROUTE = os.getenv("MEDIA_ROUTE", "/asl-videos")
FINGERSPELL_DIR = os.getenv("FINGERSPELL_DIR", os.path.join(DATA_DIR, "fingerspelling"))
LETTER_DATASET_DIR = os.getenv("LETTER_DATASET_DIR", MEDIA_DIR)

# ── Playback timings (seconds) ────────────────────────────────────────────
IMAGE_DISPLAY_SECONDS = float(os.getenv("IMAGE_DISPLAY_SECONDS", "0.5"))
TRANSITION_PAUSE_SECONDS = float(os.getenv("TRANSITION_PAUSE_SECONDS", "0.15"))
IMAGE_LOAD_TIMEOUT = float(os.getenv("IMAGE_LOAD_TIMEOUT", "3.0"))
VIDEO_LOAD_TIMEOUT = float(os.getenv("VIDEO_LOAD_TIMEOUT", "5.0"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10.0"))

# ── Caption enhancement (optional) ────────────────────────────────────────
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4.1-mini")

# Set PARTIAL_MATCH=0 in .env to disable the whole-caption substring fallback.
PARTIAL_MATCH = os.getenv("PARTIAL_MATCH", "1").strip().lower() in ("1", "true", "yes")

# ── Overlay client ────────────────────────────────────────────────────────
PREFERENCES_PATH = os.getenv(
    "PREFERENCES_PATH", os.path.join(os.path.expanduser("~"), ".signclip", "preferences.json")
)
