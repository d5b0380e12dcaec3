"""
In-process workspace: the set of open views (tabs) of a tabpalette session.

Views are identified by opaque handles. Listeners subscribe to lifecycle
events (opened, focused, closed, pinned) instead of diffing the view list.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from ..exceptions import StaleViewError
from .protocols import OpenHint, OpenView

logger = logging.getLogger(__name__)


class ViewEventKind(Enum):
    OPENED = "opened"
    FOCUSED = "focused"
    CLOSED = "closed"
    PINNED = "pinned"


@dataclass(frozen=True)
class ViewEvent:
    kind: ViewEventKind
    view: OpenView


ViewListener = Callable[[ViewEvent], None]


class Workspace:
    """Ordered open views with a single active view."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._views: list[OpenView] = []
        self._active: str | None = None
        self._listeners: list[ViewListener] = []
        self._ids = itertools.count(1)

    # -- events -------------------------------------------------------------

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a lifecycle listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: ViewEventKind, view: OpenView) -> None:
        event = ViewEvent(kind, view)
        for listener in list(self._listeners):
            listener(event)

    # -- lookups ------------------------------------------------------------

    def _index_of(self, handle: str) -> int:
        for i, view in enumerate(self._views):
            if view.handle == handle:
                return i
        raise StaleViewError(handle=handle)

    def get(self, handle: str) -> OpenView:
        return self._views[self._index_of(handle)]

    def list_open_views(self) -> list[OpenView]:
        return list(self._views)

    def active_handle(self) -> str | None:
        return self._active

    def active_view(self) -> OpenView | None:
        if self._active is None:
            return None
        return self.get(self._active)

    # -- mutations ----------------------------------------------------------

    def _touch(self, handle: str) -> OpenView:
        index = self._index_of(handle)
        view = replace(self._views[index], last_active=self._clock())
        self._views[index] = view
        self._active = handle
        return view

    def focus(self, handle: str) -> None:
        view = self._touch(handle)
        logger.debug(f"Focused {handle} ({view.file_path})")
        self._emit(ViewEventKind.FOCUSED, view)

    def detach(self, handle: str) -> None:
        index = self._index_of(handle)
        view = self._views.pop(index)
        if self._active == handle:
            self._active = None
            if self._views:
                # Fall back to the most recently used remaining view
                fallback = max(self._views, key=lambda v: v.last_active)
                self._touch(fallback.handle)
        logger.info(f"Closed view {handle} ({view.file_path})")
        self._emit(ViewEventKind.CLOSED, view)

    def set_pinned(self, handle: str, pinned: bool) -> None:
        index = self._index_of(handle)
        view = replace(self._views[index], pinned=pinned)
        self._views[index] = view
        self._emit(ViewEventKind.PINNED, view)

    def open_file(self, path: str, hint: OpenHint | None = None) -> str:
        """Open path in a view and focus it. Returns the view's handle.

        Without new_tab the target view (hint.reuse_handle, else the active
        view) is replaced, unless it is pinned or gone, in which case a new
        view is opened.
        """
        hint = hint or OpenHint()
        target = None if hint.new_tab else (hint.reuse_handle or self._active)

        if target is not None:
            try:
                index = self._index_of(target)
            except StaleViewError:
                index = None
            if index is not None and not self._views[index].pinned:
                self._views[index] = replace(self._views[index], file_path=path)
                view = self._touch(target)
                logger.info(f"Opened {path} in {target}")
                self._emit(ViewEventKind.OPENED, view)
                return target

        handle = f"view-{next(self._ids)}"
        self._views.append(OpenView(handle=handle, file_path=path))
        view = self._touch(handle)
        logger.info(f"Opened {path} in new view {handle}")
        self._emit(ViewEventKind.OPENED, view)
        return handle

    def cycle(self, step: int) -> str | None:
        """Focus the previous (-1) or next (+1) view in opening order, wrapping around."""
        if not self._views:
            return None
        if self._active is None:
            index = 0 if step > 0 else len(self._views) - 1
        else:
            index = (self._index_of(self._active) + step) % len(self._views)
        handle = self._views[index].handle
        self.focus(handle)
        return handle
