"""User settings stored as JSON in the home directory."""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from LispIndent import DEFAULT_INDENT_WIDTH

log = logging.getLogger(__name__)

SETTINGS_PATH = Path.home() / ".lisppad.json"

MIN_INDENT_WIDTH = 1
MAX_INDENT_WIDTH = 8

DEFAULT_SETTINGS: Dict[str, Any] = {
    "theme": "dark",
    "font_size": 13,
    "word_wrap": True,
    "indent_width": DEFAULT_INDENT_WIDTH,
}


def coerce_indent_width(value: Any) -> int:
    """Return ``value`` as a usable indent width, or the default."""
    try:
        width = int(value)
    except (TypeError, ValueError):
        log.warning("Ignoring invalid indent width %r", value)
        return DEFAULT_INDENT_WIDTH
    if not MIN_INDENT_WIDTH <= width <= MAX_INDENT_WIDTH:
        log.warning("Indent width %d out of range, using %d", width, DEFAULT_INDENT_WIDTH)
        return DEFAULT_INDENT_WIDTH
    return width


def load_settings(path: Path = SETTINGS_PATH) -> Dict[str, Any]:
    """Load settings from disk, filling in defaults for missing keys."""
    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return settings
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        log.warning("Could not read settings from %s: %s", path, exc)
        return settings
    if not isinstance(data, dict):
        log.warning("Settings file %s does not hold an object, using defaults", path)
        return settings

    settings.update(data)
    settings["indent_width"] = coerce_indent_width(settings["indent_width"])
    return settings


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_PATH) -> bool:
    """Write settings to disk. Returns False if the file could not be written."""
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2)
    except OSError as exc:
        log.warning("Could not save settings to %s: %s", path, exc)
        return False
    return True
