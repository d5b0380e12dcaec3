"""Custom exception hierarchy for tabpalette.

Exception Hierarchy:
    TabPaletteError (base)
    ├── ConfigurationError - invalid or unusable settings
    ├── CollaboratorUnavailableError - a host service is absent or disabled
    ├── StaleViewError - a view handle no longer resolves
    ├── VaultPathError - a path escapes the vault root
    └── NoteCreationError - daily note template read or file creation failed

Usage:
    from tabpalette.exceptions import StaleViewError

    try:
        workspace.focus(handle)
    except StaleViewError:
        ...
"""

from typing import Any, Optional


class TabPaletteError(Exception):
    """Base exception for all tabpalette errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., paths, handles)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(TabPaletteError):
    """Settings are invalid or cannot be applied."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        *,
        key: Optional[str] = None,
        **context: Any,
    ) -> None:
        if key:
            context["key"] = key
        super().__init__(message, **context)


class CollaboratorUnavailableError(TabPaletteError):
    """A host collaborator (e.g. the bookmark store) is absent or disabled."""

    def __init__(self, message: str = "Collaborator unavailable", **context: Any) -> None:
        super().__init__(message, **context)


class StaleViewError(TabPaletteError):
    """A view handle no longer refers to an open view."""

    def __init__(
        self,
        message: str = "View is no longer open",
        *,
        handle: Optional[str] = None,
        **context: Any,
    ) -> None:
        if handle:
            context["handle"] = handle
        super().__init__(message, **context)


class VaultPathError(TabPaletteError):
    """A requested path resolves outside of the vault root."""

    def __init__(
        self,
        message: str = "Path is outside the vault",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class NoteCreationError(TabPaletteError):
    """Creating a note (or reading its template) failed - retryable."""

    def __init__(
        self,
        message: str = "Note creation failed",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, retryable=True, **context)
