"""Exception hierarchy for linkcheck.

Hierarchy::

    LinkCheckError
    ├── SourceError
    │   ├── SourceNotFound
    │   └── SourceUnreadable
    ├── UnexpectedError          (url, detail)
    ├── LimiterClosed
    └── DestinationUnwritable

``SourceError`` and ``DestinationUnwritable`` are fatal to a run.
``UnexpectedError`` is scoped to a single URL: the orchestrator records it
and carries on with the rest of the batch.
"""

from __future__ import annotations

from pathlib import Path


class LinkCheckError(Exception):
    """Base class for all linkcheck exceptions."""


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class SourceError(LinkCheckError):
    """Raised when the URL source file cannot be used.

    Args:
        path: The offending input path.
    """

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = str(path)


class SourceNotFound(SourceError):
    """The input path does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"File does not exist: {path}", path)


class SourceUnreadable(SourceError):
    """The input path exists but could not be read or decoded."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Failed to read file: {path}", path)


# ---------------------------------------------------------------------------
# Per-URL fetch
# ---------------------------------------------------------------------------


class UnexpectedError(LinkCheckError):
    """A fetch failed before a classifiable HTTP response was obtained.

    Covers connection, DNS, TLS, timeout and malformed-URL failures, errors
    while reading the response body, and permit-acquisition faults.

    Args:
        url: The URL whose fetch failed.
        detail: Human-readable description of the underlying cause.
    """

    def __init__(self, url: str, detail: str = "") -> None:
        message = f"Unexpected error: {url}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.url = url
        self.detail = detail


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class LimiterClosed(LinkCheckError):
    """Raised when a permit is requested from a limiter that was torn down."""


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class DestinationUnwritable(LinkCheckError):
    """The report file could not be created or written."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Error writing file: {path}")
        self.path = str(path)
