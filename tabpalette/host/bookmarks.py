"""
JSON-backed bookmark store.

Uses the Obsidian bookmarks.json layout:

    {"items": [{"type": "file", "path": "Projects/alpha.md", "title": "alpha"}]}

Only "file" items are managed here; groups, searches and other item types
are preserved untouched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..exceptions import CollaboratorUnavailableError

logger = logging.getLogger(__name__)


class JsonBookmarkStore:
    """BookmarkStore implementation persisted to a JSON file."""

    def __init__(self, path: Path | str, enabled: bool = True):
        self.path = Path(path)
        self.enabled = enabled

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"items": []}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not read bookmarks from {self.path}: {e}")
            return {"items": []}
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            logger.warning(f"Bookmarks file {self.path} has no item list, ignoring it")
            return {"items": []}
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    @staticmethod
    def _is_file_item(item: Any) -> bool:
        return isinstance(item, dict) and item.get("type") == "file" and bool(item.get("path"))

    def list_file_bookmarks(self) -> list[str]:
        if not self.enabled:
            return []
        return [item["path"] for item in self._load()["items"] if self._is_file_item(item)]

    def is_bookmarked(self, path: str) -> bool:
        return path in self.list_file_bookmarks()

    def _require_enabled(self) -> None:
        if not self.enabled:
            raise CollaboratorUnavailableError("Bookmarks are disabled", store=str(self.path))

    def add_bookmark(self, path: str, title: str) -> None:
        self._require_enabled()
        data = self._load()
        if any(self._is_file_item(i) and i["path"] == path for i in data["items"]):
            return
        data["items"].append({"type": "file", "path": path, "title": title})
        self._save(data)
        logger.info(f"Bookmarked {path}")

    def remove_bookmark(self, path: str) -> None:
        self._require_enabled()
        data = self._load()
        kept = [i for i in data["items"] if not (self._is_file_item(i) and i["path"] == path)]
        if len(kept) == len(data["items"]):
            return
        data["items"] = kept
        self._save(data)
        logger.info(f"Removed bookmark {path}")
