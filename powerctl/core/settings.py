from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from powerctl.core import paths

logger = logging.getLogger(__name__)

GSETTINGS_SCHEMA = "org.mate.power-manager"

KEYRING_BACKENDS = ("secret", "gnome-keyring", "none")

@dataclass(frozen=True)
class PowerSettings:
    lock_keyring_on_suspend: bool = True
    lock_keyring_on_hibernate: bool = True
    network_sleep: bool = False
    keyring_backend: str = "secret"  # one of KEYRING_BACKENDS
    assume_resume_on_no_reply: bool = True

# On-disk key -> dataclass field
KEYS = {
    "lock-keyring-suspend": "lock_keyring_on_suspend",
    "lock-keyring-hibernate": "lock_keyring_on_hibernate",
    "network-sleep": "network_sleep",
    "keyring-backend": "keyring_backend",
    "assume-resume-on-no-reply": "assume_resume_on_no_reply",
}

# Keys shared with the desktop power manager schema
GSETTINGS_KEYS = ("lock-keyring-suspend", "lock-keyring-hibernate", "network-sleep")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"Not a boolean: {value!r}")

def _bool_value(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return parse_bool(value)
        except ValueError:
            pass
    logger.warning("Invalid value %r for %s, using %r", value, key, default)
    return default

def load_json_settings(path: Path | None = None) -> PowerSettings | None:
    path = path or paths.SETTINGS_FILE
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring unreadable settings file %s: expected a JSON object", path)
        return None

    defaults = PowerSettings()
    backend = str(data.get("keyring-backend", defaults.keyring_backend))
    if backend not in KEYRING_BACKENDS:
        logger.warning("Unknown keyring backend %r, using %r", backend, defaults.keyring_backend)
        backend = defaults.keyring_backend

    return PowerSettings(
        lock_keyring_on_suspend=_bool_value(data, "lock-keyring-suspend", defaults.lock_keyring_on_suspend),
        lock_keyring_on_hibernate=_bool_value(data, "lock-keyring-hibernate", defaults.lock_keyring_on_hibernate),
        network_sleep=_bool_value(data, "network-sleep", defaults.network_sleep),
        keyring_backend=backend,
        assume_resume_on_no_reply=_bool_value(
            data, "assume-resume-on-no-reply", defaults.assume_resume_on_no_reply
        ),
    )

def load_gsettings(schema: str = GSETTINGS_SCHEMA) -> PowerSettings | None:
    """
    Read the boolean options from GSettings.

    Returns None when PyGObject is missing or the schema is not installed,
    so callers can fall back to the defaults.
    """
    try:
        from gi.repository import Gio
    except ImportError:
        return None

    source = Gio.SettingsSchemaSource.get_default()
    if source is None or source.lookup(schema, True) is None:
        return None

    gs = Gio.Settings.new(schema)
    return PowerSettings(
        lock_keyring_on_suspend=gs.get_boolean("lock-keyring-suspend"),
        lock_keyring_on_hibernate=gs.get_boolean("lock-keyring-hibernate"),
        network_sleep=gs.get_boolean("network-sleep"),
    )

def load_settings() -> PowerSettings:
    """JSON file first, then GSettings, then defaults."""
    return load_json_settings() or load_gsettings() or PowerSettings()

def settings_source() -> str:
    if load_json_settings() is not None:
        return str(paths.SETTINGS_FILE)
    if load_gsettings() is not None:
        return f"gsettings:{GSETTINGS_SCHEMA}"
    return "defaults"

def save_settings(s: PowerSettings, path: Path | None = None) -> None:
    path = path or paths.SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({key: getattr(s, field) for key, field in KEYS.items()}, indent=2)
        + "\n"
    )

def with_value(s: PowerSettings, key: str, value: str) -> PowerSettings:
    """Return a copy of ``s`` with the on-disk ``key`` set from a string value."""
    if key not in KEYS:
        raise ValueError(f"Unknown setting '{key}' (known: {', '.join(KEYS)})")

    if key == "keyring-backend":
        if value not in KEYRING_BACKENDS:
            raise ValueError(f"Unknown keyring backend '{value}' (known: {', '.join(KEYRING_BACKENDS)})")
        return replace(s, keyring_backend=value)

    return replace(s, **{KEYS[key]: parse_bool(value)})
