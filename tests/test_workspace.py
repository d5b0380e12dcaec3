"""Tests for the in-process workspace."""

import pytest

from tabpalette.exceptions import StaleViewError
from tabpalette.host.protocols import OpenHint, ViewManager
from tabpalette.host.workspace import ViewEventKind


class TestOpenFile:
    """Tests for opening files into views."""

    def test_implements_view_manager(self, workspace) -> None:
        assert isinstance(workspace, ViewManager)

    def test_first_open_creates_a_view(self, workspace) -> None:
        handle = workspace.open_file("inbox.md")
        assert handle == "view-1"
        assert workspace.active_handle() == handle
        assert workspace.get(handle).file_path == "inbox.md"

    def test_reuses_active_view(self, workspace) -> None:
        handle = workspace.open_file("inbox.md")
        assert workspace.open_file("Notes/random.md") == handle
        assert [v.file_path for v in workspace.list_open_views()] == ["Notes/random.md"]

    def test_new_tab_hint(self, workspace) -> None:
        workspace.open_file("inbox.md")
        workspace.open_file("Notes/random.md", OpenHint(new_tab=True))
        assert len(workspace.list_open_views()) == 2

    def test_reuse_handle_hint(self, workspace, open_tabs) -> None:
        first, _second = open_tabs("a.md", "b.md")
        assert workspace.open_file("c.md", OpenHint(reuse_handle=first)) == first
        assert [v.file_path for v in workspace.list_open_views()] == ["c.md", "b.md"]

    def test_pinned_target_is_never_replaced(self, workspace) -> None:
        handle = workspace.open_file("inbox.md")
        workspace.set_pinned(handle, True)

        new_handle = workspace.open_file("Notes/random.md")

        assert new_handle != handle
        assert workspace.get(handle).file_path == "inbox.md"

    def test_stale_reuse_handle_opens_new_view(self, workspace) -> None:
        handle = workspace.open_file("b.md", OpenHint(reuse_handle="view-99"))
        assert workspace.get(handle).file_path == "b.md"


class TestLifecycle:
    """Tests for focus, detach, pin and lifecycle events."""

    def test_events_are_published(self, workspace) -> None:
        events = []
        workspace.subscribe(events.append)

        handle = workspace.open_file("inbox.md")
        workspace.set_pinned(handle, True)
        workspace.focus(handle)
        workspace.detach(handle)

        assert [e.kind for e in events] == [
            ViewEventKind.OPENED,
            ViewEventKind.PINNED,
            ViewEventKind.FOCUSED,
            ViewEventKind.CLOSED,
        ]
        assert events[-1].view.file_path == "inbox.md"

    def test_unsubscribe(self, workspace) -> None:
        events = []
        unsubscribe = workspace.subscribe(events.append)
        unsubscribe()
        workspace.open_file("inbox.md")
        assert events == []

    def test_detach_falls_back_to_most_recent_view(self, workspace, open_tabs) -> None:
        a, b, c = open_tabs("a.md", "b.md", "c.md")
        workspace.focus(a)
        workspace.detach(a)
        assert workspace.active_handle() == c

    def test_detach_last_view(self, workspace) -> None:
        handle = workspace.open_file("inbox.md")
        workspace.detach(handle)
        assert workspace.active_handle() is None
        assert workspace.active_view() is None

    def test_focus_updates_last_active(self, workspace, open_tabs) -> None:
        a, b = open_tabs("a.md", "b.md")
        workspace.focus(a)
        assert workspace.get(a).last_active > workspace.get(b).last_active

    @pytest.mark.parametrize("method", ["focus", "detach", "get"])
    def test_unknown_handles_are_stale(self, workspace, method) -> None:
        with pytest.raises(StaleViewError):
            getattr(workspace, method)("view-42")

    def test_set_pinned_unknown_handle(self, workspace) -> None:
        with pytest.raises(StaleViewError):
            workspace.set_pinned("view-42", True)


class TestCycle:
    """Tests for previous/next tab with wraparound."""

    def test_next_wraps_to_first(self, workspace, open_tabs) -> None:
        a, b, c = open_tabs("a.md", "b.md", "c.md")
        assert workspace.cycle(1) == a

    def test_previous_wraps_to_last(self, workspace, open_tabs) -> None:
        a, b, c = open_tabs("a.md", "b.md", "c.md")
        workspace.focus(a)
        assert workspace.cycle(-1) == c

    def test_moves_in_opening_order(self, workspace, open_tabs) -> None:
        a, b, c = open_tabs("a.md", "b.md", "c.md")
        workspace.focus(a)
        assert workspace.cycle(1) == b
        assert workspace.cycle(1) == c

    def test_empty_workspace(self, workspace) -> None:
        assert workspace.cycle(1) is None
