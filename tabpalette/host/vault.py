"""
Local file index over a vault directory.

Paths are vault-relative POSIX strings ("Projects/alpha.md"). Tags are read
lazily and cached per file until its modification time changes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath

from ..config.constants import INDEXED_EXTENSIONS
from ..exceptions import NoteCreationError, VaultPathError
from ..models.items import display_name_for
from ..services.tag_parser import extract_tags
from .protocols import VaultFile

logger = logging.getLogger(__name__)


class LocalVault:
    """FileIndex implementation backed by a directory on disk."""

    def __init__(self, root: Path | str, extensions: tuple[str, ...] = INDEXED_EXTENSIONS):
        self.root = Path(root).expanduser().resolve()
        self.extensions = extensions
        self._tag_cache: dict[str, tuple[float, list[str]]] = {}

    def resolve(self, path: str) -> Path:
        """Absolute location of a vault-relative path.

        Raises:
            VaultPathError: If the path is absolute or escapes the vault
        """
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise VaultPathError(path=path)
        resolved = (self.root / relative).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise VaultPathError(path=path)
        return resolved

    def relative(self, absolute: Path) -> str:
        return absolute.relative_to(self.root).as_posix()

    def list_all_files(self) -> list[VaultFile]:
        """Every indexed file, sorted by path. Dot-directories are skipped."""
        files = []
        if not self.root.is_dir():
            logger.warning(f"Vault root {self.root} is not a directory")
            return files
        for candidate in self.root.rglob("*"):
            if candidate.suffix not in self.extensions or not candidate.is_file():
                continue
            rel = candidate.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            path = rel.as_posix()
            files.append(VaultFile(path=path, display_name=display_name_for(path)))
        files.sort(key=lambda f: f.path)
        return files

    def exists(self, path: str) -> bool:
        try:
            return self.resolve(path).is_file()
        except VaultPathError:
            return False

    def get_tags_for(self, path: str) -> list[str]:
        try:
            location = self.resolve(path)
            mtime = location.stat().st_mtime
        except (VaultPathError, OSError):
            return []

        cached = self._tag_cache.get(path)
        if cached and cached[0] == mtime:
            return list(cached[1])

        if location.suffix != ".md":
            tags: list[str] = []
        else:
            try:
                tags = extract_tags(location.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Could not read tags from {path}: {e}")
                tags = []
        self._tag_cache[path] = (mtime, tags)
        return list(tags)

    async def read_file(self, path: str) -> str:
        location = self.resolve(path)
        return await asyncio.to_thread(location.read_text, encoding="utf-8")

    async def create_file(self, path: str, content: str) -> None:
        """Create a new note, including missing parent folders.

        Raises:
            NoteCreationError: If the file already exists or cannot be written
        """
        location = self.resolve(path)
        if location.exists():
            raise NoteCreationError("File already exists", path=path)

        def _write() -> None:
            location.parent.mkdir(parents=True, exist_ok=True)
            with open(location, "x", encoding="utf-8") as f:
                f.write(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise NoteCreationError(str(e), path=path) from e
        logger.info(f"Created {path}")
