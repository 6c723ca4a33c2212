"""Persistent settings for Yahtzee.

Stores user preferences in ~/.yahtzee_settings.json.
No front-end dependency — follows the same pattern as score_history.py.
"""

import json
import os
import tempfile
from pathlib import Path

DEFAULTS = {
    "show_dots_on_dice": True,
}


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".yahtzee_settings.json"


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            return dict(DEFAULTS)
        # Merge: only keep known keys, fill missing from defaults
        result = dict(DEFAULTS)
        for key in DEFAULTS:
            if key in data:
                result[key] = data[key]
        return result
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return dict(DEFAULTS)


def save_settings(settings, path=None):
    """Write settings dict to JSON atomically. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(json.dumps(settings, indent=2))
            os.replace(tmp, path)
        except OSError:
            os.unlink(tmp)
            raise
    except OSError:
        pass


class Preference:
    """A single typed setting with a default.

    Reads fall back to `default` when the file has no value, or a value of
    the wrong type.
    """

    def __init__(self, key, default, path=None):
        self.key = key
        self.default = default
        self.path = path

    def get(self):
        value = load_settings(self.path).get(self.key, self.default)
        if not isinstance(value, type(self.default)):
            return self.default
        return value

    def set(self, value):
        settings = load_settings(self.path)
        settings[self.key] = value
        save_settings(settings, self.path)


def show_dots_on_dice(path=None):
    """Dice face style: pips when True, digits when False."""
    return Preference("show_dots_on_dice", DEFAULTS["show_dots_on_dice"], path)
