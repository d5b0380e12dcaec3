"""Configuration for tabpalette."""

from .constants import get_config_dir
from .settings import PaletteSettings, load_settings, save_settings

__all__ = [
    "PaletteSettings",
    "get_config_dir",
    "load_settings",
    "save_settings",
]
