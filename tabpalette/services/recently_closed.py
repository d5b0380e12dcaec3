"""
Recently-closed tab history.

A small ring buffer: most recent first, unique by path, never longer than
RECENTLY_CLOSED_LIMIT. It is persisted inside the settings record so it
survives across palette sessions.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from ..config.constants import RECENTLY_CLOSED_LIMIT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClosedTabRecord:
    """A tab that was closed."""

    path: str
    title: str
    extension: str

    @classmethod
    def for_path(cls, path: str, title: str | None = None) -> ClosedTabRecord:
        stem, ext = posixpath.splitext(posixpath.basename(path))
        return cls(path=path, title=title or stem, extension=ext.lstrip("."))


class RecentlyClosedHistory:
    """Bounded, de-duplicated, most-recent-first list of closed tabs."""

    def __init__(
        self,
        records: Iterable[ClosedTabRecord] = (),
        limit: int = RECENTLY_CLOSED_LIMIT,
    ):
        self._limit = limit
        self._records: list[ClosedTabRecord] = []
        # Oldest first so the first given record ends up in front
        for record in reversed(list(records)):
            self.push(record)

    @property
    def records(self) -> list[ClosedTabRecord]:
        return list(self._records)

    @property
    def paths(self) -> list[str]:
        return [r.path for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return any(r.path == path for r in self._records)

    def push(self, record: ClosedTabRecord) -> None:
        """Record a closed tab at the front, dropping older duplicates and overflow."""
        self._records = [r for r in self._records if r.path != record.path]
        self._records.insert(0, record)
        del self._records[self._limit:]

    def remove(self, path: str) -> bool:
        """Forget a path. Returns True if it was present."""
        before = len(self._records)
        self._records = [r for r in self._records if r.path != path]
        return len(self._records) != before

    def prune(self, open_paths: Iterable[str]) -> bool:
        """Drop records whose file is open again. Returns True if anything changed."""
        open_set = set(open_paths)
        kept = [r for r in self._records if r.path not in open_set]
        changed = len(kept) != len(self._records)
        self._records = kept
        return changed

    def clear(self) -> None:
        self._records = []

    def to_list(self) -> list[dict[str, str]]:
        return [asdict(r) for r in self._records]

    @classmethod
    def from_list(
        cls, raw: Iterable[dict[str, Any]], limit: int = RECENTLY_CLOSED_LIMIT
    ) -> RecentlyClosedHistory:
        """Rebuild from persisted dicts, skipping malformed entries."""
        records = []
        for entry in raw:
            path = entry.get("path") if isinstance(entry, dict) else None
            if not isinstance(path, str) or not path:
                logger.debug(f"Skipping malformed recently-closed entry: {entry!r}")
                continue
            base = ClosedTabRecord.for_path(path)
            records.append(
                ClosedTabRecord(
                    path=path,
                    title=str(entry.get("title") or base.title),
                    extension=str(entry.get("extension") or base.extension),
                )
            )
        return cls(records, limit=limit)
