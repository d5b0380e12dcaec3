"""Data models for tabpalette."""

from .items import (
    DailyLabel,
    DailyNotePayload,
    ItemKind,
    PaletteItem,
    TabPayload,
)

__all__ = [
    "DailyLabel",
    "DailyNotePayload",
    "ItemKind",
    "PaletteItem",
    "TabPayload",
]
