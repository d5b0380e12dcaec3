"""
Section layout and the cross-section transition table.

Selection moves inside a section and clamps at its ends, except for the
transfers listed in TRANSITIONS. Keeping every transfer in one table makes
the wrap policy testable on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SectionId(Enum):
    """Palette sections, declared in left-to-right order."""

    SEARCH = "search"
    TABS = "tabs"
    BOOKMARKS = "bookmarks"
    DAILY_NOTES = "daily_notes"


SECTION_ORDER: tuple[SectionId, ...] = tuple(SectionId)

SECTION_TITLES = {
    SectionId.SEARCH: "Vault Search",
    SectionId.TABS: "Open Tabs",
    SectionId.BOOKMARKS: "Bookmarks",
    SectionId.DAILY_NOTES: "Daily Notes",
}

# Which section gets focus first when the palette opens
INITIAL_PRIORITY: tuple[SectionId, ...] = (
    SectionId.TABS,
    SectionId.BOOKMARKS,
    SectionId.DAILY_NOTES,
    SectionId.SEARCH,
)


class Landing(Enum):
    """Where the selection lands in the target section."""

    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class Transfer:
    target: SectionId
    landing: Landing


# (active section, at boundary, direction) -> transfer
TRANSITIONS: dict[tuple[SectionId, bool, int], Transfer] = {
    (SectionId.BOOKMARKS, True, +1): Transfer(SectionId.DAILY_NOTES, Landing.FIRST),
    (SectionId.DAILY_NOTES, True, -1): Transfer(SectionId.BOOKMARKS, Landing.LAST),
}


@dataclass(frozen=True)
class Move:
    """Result of a selection move."""

    section: SectionId
    index: int


def clamp_index(index: int, length: int) -> int:
    """Clamp index into [0, length - 1], or 0 for an empty section."""
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def at_boundary(index: int, length: int, delta: int) -> bool:
    """Whether moving by delta would leave the section. Empty sections are always at a boundary."""
    if length == 0:
        return True
    if delta > 0:
        return index >= length - 1
    return index <= 0


def resolve_move(
    section: SectionId,
    index: int,
    delta: int,
    lengths: dict[SectionId, int],
    enabled: tuple[SectionId, ...],
) -> Move:
    """
    Compute where the selection goes after moving by delta (+1 or -1).

    Args:
        section: Active section
        index: Current selected index in the active section
        delta: Direction of movement
        lengths: Filtered item count per section
        enabled: Currently enabled sections

    Returns:
        The section and index holding the selection afterwards
    """
    assert delta in (-1, 1), f"delta must be +1 or -1, got {delta}"
    length = lengths.get(section, 0)
    step = 1 if delta > 0 else -1

    transfer = TRANSITIONS.get((section, at_boundary(index, length, step), step))
    if transfer is not None and transfer.target in enabled:
        target_length = lengths.get(transfer.target, 0)
        if target_length > 0:
            landing = 0 if transfer.landing is Landing.FIRST else target_length - 1
            return Move(transfer.target, landing)

    return Move(section, clamp_index(index + step, length))


def step_section(
    current: SectionId, direction: str, enabled: tuple[SectionId, ...]
) -> SectionId:
    """Move one section left or right among the enabled ones, clamped at the ends."""
    assert direction in ("left", "right"), f"Unknown direction {direction!r}"
    assert current in enabled, f"{current} is not enabled"
    position = enabled.index(current)
    position += 1 if direction == "right" else -1
    return enabled[max(0, min(position, len(enabled) - 1))]


def nearest_enabled(section: SectionId, enabled: tuple[SectionId, ...]) -> SectionId:
    """The enabled section closest to section in the canonical order; ties go left."""
    assert enabled, "At least one section must be enabled"
    if section in enabled:
        return section
    origin = SECTION_ORDER.index(section)
    return min(enabled, key=lambda s: (abs(SECTION_ORDER.index(s) - origin), SECTION_ORDER.index(s)))
