"""Shared pytest fixtures for tabpalette tests."""

import itertools
from datetime import date

import pytest

from tabpalette.config.settings import PaletteSettings
from tabpalette.exceptions import NoteCreationError
from tabpalette.host.protocols import OpenHint, VaultFile
from tabpalette.host.workspace import Workspace
from tabpalette.models.items import display_name_for
from tabpalette.ui.palette.palette_controller import PaletteController

TODAY = date(2024, 3, 15)


class FakeFileIndex:
    """In-memory FileIndex: path -> (content, tags)."""

    def __init__(self, files=None, tags=None):
        self.contents = {path: "" for path in (files or [])}
        self.tags = dict(tags or {})
        self.created = []
        self.tag_lookups = []
        self.create_error = None
        self.create_gate = None

    def add(self, path, content="", tags=()):
        self.contents[path] = content
        if tags:
            self.tags[path] = list(tags)

    def list_all_files(self):
        return [VaultFile(path=p, display_name=display_name_for(p)) for p in self.contents]

    def get_tags_for(self, path):
        self.tag_lookups.append(path)
        return list(self.tags.get(path, []))

    def exists(self, path):
        return path in self.contents

    async def create_file(self, path, content):
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.create_error is not None:
            raise self.create_error
        if path in self.contents:
            raise NoteCreationError("File already exists", path=path)
        self.created.append((path, content))
        self.contents[path] = content

    async def read_file(self, path):
        return self.contents[path]


class FakeBookmarkStore:
    """In-memory BookmarkStore."""

    def __init__(self, paths=(), enabled=True):
        self.paths = list(paths)
        self.enabled = enabled

    def list_file_bookmarks(self):
        return list(self.paths) if self.enabled else []

    def add_bookmark(self, path, title):
        if path not in self.paths:
            self.paths.append(path)

    def remove_bookmark(self, path):
        self.paths = [p for p in self.paths if p != path]


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Keep settings and logs out of the real home directory."""
    directory = tmp_path / "config"
    monkeypatch.setenv("TABPALETTE_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture
def workspace():
    """Workspace with a deterministic clock (each touch is one tick later)."""
    ticks = itertools.count(1)
    return Workspace(clock=lambda: float(next(ticks)))


@pytest.fixture
def file_index():
    return FakeFileIndex(
        [
            "Projects/alpha.md",
            "Projects/beta.md",
            "Notes/random.md",
            "inbox.md",
        ]
    )


@pytest.fixture
def bookmark_store():
    return FakeBookmarkStore()


@pytest.fixture
def settings():
    return PaletteSettings()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def make_controller(workspace, file_index, bookmark_store, settings, notices):
    """Factory building a PaletteController over the shared fakes."""

    def factory(config=None, **overrides):
        kwargs = {
            "bookmark_store": bookmark_store,
            "today": lambda: TODAY,
            "on_notice": lambda message, severity: notices.append((message, severity)),
        }
        kwargs.update(overrides)
        return PaletteController(workspace, file_index, config or settings, **kwargs)

    return factory


@pytest.fixture
def open_tabs(workspace):
    """Open the given paths as tabs, each in its own view. Returns their handles."""

    def opener(*paths):
        return [workspace.open_file(path, OpenHint(new_tab=True)) for path in paths]

    return opener

