"""
Quick switcher palette.

Provides a modal overlay for jumping between open tabs, bookmarks,
vault search results and daily notes.
"""

from .navigation import SectionId
from .palette_controller import ActivationOutcome, PaletteController, PaletteSnapshot
from .palette_screen import PaletteScreen

__all__ = [
    "ActivationOutcome",
    "PaletteController",
    "PaletteScreen",
    "PaletteSnapshot",
    "SectionId",
]
