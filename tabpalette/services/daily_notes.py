"""
Daily note resolution.

A daily note is a file named after a date using a Moment-style pattern
(e.g. "YYYY-MM-DD") inside a configurable folder. The palette offers the
notes for yesterday, today and tomorrow, whether or not they exist yet.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable
from datetime import date, timedelta

from ..models.items import DailyLabel, DailyNotePayload, ItemKind, PaletteItem

# Longest tokens first so "YYYY" wins over "YY", "MMMM" over "MM", etc.
_TOKEN_RE = re.compile(r"\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|Do|DD|D|dddd|ddd|d")

_LABEL_OFFSETS = (
    (DailyLabel.YESTERDAY, -1),
    (DailyLabel.TODAY, 0),
    (DailyLabel.TOMORROW, 1),
)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _render_token(token: str, day: date) -> str:
    if token.startswith("["):
        return token[1:-1]
    if token == "YYYY":
        return f"{day.year:04d}"
    if token == "YY":
        return f"{day.year % 100:02d}"
    if token == "MMMM":
        return day.strftime("%B")
    if token == "MMM":
        return day.strftime("%b")
    if token == "MM":
        return f"{day.month:02d}"
    if token == "M":
        return str(day.month)
    if token == "Do":
        return _ordinal(day.day)
    if token == "DD":
        return f"{day.day:02d}"
    if token == "D":
        return str(day.day)
    if token == "dddd":
        return day.strftime("%A")
    if token == "ddd":
        return day.strftime("%a")
    # "d": day of week, Sunday = 0
    return str(day.isoweekday() % 7)


def format_date(day: date, pattern: str) -> str:
    """Format day with a Moment-style pattern. Text in [brackets] is literal."""
    return _TOKEN_RE.sub(lambda m: _render_token(m.group(0), day), pattern)


def daily_note_path(day: date, date_format: str, folder: str = "") -> str:
    """Vault-relative path of the daily note for day."""
    name = f"{format_date(day, date_format)}.md"
    folder = folder.strip().strip("/")
    return posixpath.join(folder, name) if folder else name


def daily_note_candidates(
    today: date,
    date_format: str,
    folder: str,
    exists: Callable[[str], bool],
    is_bookmarked: Callable[[str], bool] | None = None,
) -> list[PaletteItem]:
    """The Yesterday / Today / Tomorrow daily note items, in that order."""
    items = []
    for label, offset in _LABEL_OFFSETS:
        day = today + timedelta(days=offset)
        path = daily_note_path(day, date_format, folder)
        items.append(
            PaletteItem(
                path=path,
                display_name=posixpath.splitext(posixpath.basename(path))[0],
                kind=ItemKind.DAILY_NOTE,
                bookmarked=bool(is_bookmarked and is_bookmarked(path)),
                payload=DailyNotePayload(label=label, day=day, exists=exists(path)),
            )
        )
    return items


_DATE_PLACEHOLDER_RE = re.compile(r"\{\{\s*date(?::([^}]*))?\s*\}\}")
_TITLE_PLACEHOLDER_RE = re.compile(r"\{\{\s*title\s*\}\}")


def render_template(template: str, day: date, title: str, date_format: str = "YYYY-MM-DD") -> str:
    """Fill {{title}}, {{date}} and {{date:FORMAT}} placeholders of a template."""
    content = _TITLE_PLACEHOLDER_RE.sub(lambda _m: title, template)
    return _DATE_PLACEHOLDER_RE.sub(
        lambda m: format_date(day, (m.group(1) or date_format).strip()), content
    )
