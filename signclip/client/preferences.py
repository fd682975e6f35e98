import json
import logging
import os
from dataclasses import asdict, dataclass, fields

from signclip import settings

logger = logging.getLogger(__name__)


@dataclass
class Preferences:
    asl_enabled: bool = False
    caption_enabled: bool = True
    backend_url: str = settings.BACKEND_URL


def load_preferences(path: str = settings.PREFERENCES_PATH) -> Preferences:
    """Read saved display preferences; unknown keys are ignored, missing ones default."""
    if not os.path.exists(path):
        return Preferences()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as e:
        logger.warning("Could not read preferences %s (%s) – using defaults", path, e)
        return Preferences()
    if not isinstance(raw, dict):
        logger.warning("Ignoring preferences %s: expected a JSON object", path)
        return Preferences()
    known = {f.name for f in fields(Preferences)}
    return Preferences(**{k: v for k, v in raw.items() if k in known})


def save_preferences(prefs: Preferences, path: str = settings.PREFERENCES_PATH) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(asdict(prefs), fh, indent=2)
