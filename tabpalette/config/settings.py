"""
tabpalette settings.

Handles persistence of palette preferences and the recently-closed history.
Settings are stored in ~/.config/tabpalette/settings.json
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from ..exceptions import ConfigurationError
from .constants import SETTINGS_FILENAME, get_config_dir

logger = logging.getLogger(__name__)

SORT_RECENCY = "recency"
SORT_OPENING_ORDER = "opening-order"
SORT_ORDERS = (SORT_RECENCY, SORT_OPENING_ORDER)

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


@dataclass
class PaletteSettings:
    """User-facing palette configuration."""

    excluded_folders: list[str] = field(default_factory=lambda: ["attachments", "Attachments"])
    show_tags: bool = True
    show_path: bool = True
    sort_order: str = SORT_RECENCY
    always_open_in_new_tab: bool = False

    # Section toggles
    enable_search: bool = True
    enable_tabs: bool = True
    enable_bookmarks: bool = True
    enable_daily_notes: bool = True

    # Daily notes
    daily_note_format: str = "YYYY-MM-DD"
    daily_note_folder: str = ""
    daily_note_template: str = ""

    # Persisted recently-closed records: [{"path", "title", "extension"}]
    recently_closed: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaletteSettings:
        """Build settings from a raw mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown settings keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def problems(self) -> dict[str, str]:
        """Problems keyed by the setting to reset (empty when the settings are usable)."""
        found = {}
        if self.sort_order not in SORT_ORDERS:
            found["sort_order"] = (
                f"Invalid sort_order '{self.sort_order}'. Valid values: {list(SORT_ORDERS)}"
            )
        if not any(
            (self.enable_search, self.enable_tabs, self.enable_bookmarks, self.enable_daily_notes)
        ):
            found["enable_search"] = "At least one section must be enabled"
        if not self.daily_note_format.strip():
            found["daily_note_format"] = "daily_note_format must not be empty"
        return found

    def validate(self) -> list[str]:
        """Return a list of problems (empty when the settings are usable)."""
        return list(self.problems().values())


def get_settings_path() -> Path:
    """
    Get path to the settings file.

    Returns:
        Path to ~/.config/tabpalette/settings.json
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / SETTINGS_FILENAME


def load_settings(path: Path | None = None) -> PaletteSettings:
    """
    Load settings from file.

    Returns:
        Settings merged with defaults; defaults if the file is missing or invalid
    """
    path = path or get_settings_path()
    if not path.exists():
        return PaletteSettings()
    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not read settings from {path}: {e}")
        return PaletteSettings()
    if not isinstance(raw, dict):
        logger.warning(f"Settings file {path} does not hold an object, using defaults")
        return PaletteSettings()
    settings = PaletteSettings.from_dict(_coerce_types(raw, path))
    defaults = PaletteSettings()
    for key, problem in settings.problems().items():
        logger.warning(f"{problem} in {path}, using the default for {key}")
        setattr(settings, key, getattr(defaults, key))
    return settings


def _coerce_types(raw: dict[str, Any], path: Path) -> dict[str, Any]:
    """Drop values of the wrong type; a list setting given as a string is split on commas."""
    defaults = PaletteSettings().to_dict()
    coerced = {}
    for key, value in raw.items():
        default = defaults.get(key)
        if default is None:
            coerced[key] = value
        elif isinstance(default, bool):
            if isinstance(value, bool):
                coerced[key] = value
        elif isinstance(default, list):
            if isinstance(value, str) and key != "recently_closed":
                coerced[key] = _parse_list(value)
            elif isinstance(value, list):
                if key == "recently_closed":
                    coerced[key] = value
                else:
                    coerced[key] = [v for v in value if isinstance(v, str)]
        elif isinstance(value, str):
            coerced[key] = value

        if key not in coerced:
            logger.warning(f"Ignoring {key}={value!r} in {path}: expected {type(default).__name__}")
    return coerced


def save_settings(settings: PaletteSettings, path: Path | None = None) -> None:
    """
    Save settings to file.

    Args:
        settings: Settings to persist
    """
    path = path or get_settings_path()
    try:
        path.write_text(json.dumps(settings.to_dict(), indent=2) + "\n")
    except OSError as e:
        # Settings are non-critical; the palette keeps working in memory
        logger.warning(f"Could not save settings to {path}: {e}")


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ConfigurationError(f"Expected a boolean, got '{raw}'", key=key)


def _parse_list(raw: str) -> list[str]:
    """Comma-separated list; entries trimmed, empty entries dropped."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def update_setting(settings: PaletteSettings, key: str, raw: str) -> PaletteSettings:
    """
    Apply a string value (as typed on the command line) to a settings key.

    Raises:
        ConfigurationError: If the key is unknown, not editable or the value is invalid
    """
    editable = {f.name: f for f in fields(PaletteSettings) if f.name != "recently_closed"}
    if key not in editable:
        raise ConfigurationError(f"Unknown setting '{key}'", key=key)

    current = getattr(settings, key)
    if isinstance(current, bool):
        value: Any = _parse_bool(key, raw)
    elif isinstance(current, list):
        value = _parse_list(raw)
    else:
        value = raw.strip() if key != "daily_note_folder" else raw.strip().strip("/")

    if key == "sort_order" and value not in SORT_ORDERS:
        raise ConfigurationError(
            f"Invalid sort order '{value}'. Valid values: {list(SORT_ORDERS)}", key=key
        )

    setattr(settings, key, value)
    errors = settings.validate()
    if errors:
        setattr(settings, key, current)
        raise ConfigurationError(errors[0], key=key)
    return settings
