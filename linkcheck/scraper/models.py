"""Data models for the link-check pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union


@dataclass(frozen=True)
class Success:
    """A 2xx response; ``label`` is the page title or the no-title placeholder."""

    label: str

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class HttpFailure:
    """A completed response with a non-2xx status."""

    status_code: int
    reason: str

    def __str__(self) -> str:
        return self.reason


Outcome = Union[Success, HttpFailure]


@dataclass(frozen=True)
class ReportEntry:
    """One line of the final report: a URL paired with its own outcome."""

    url: str
    outcome: Outcome


@dataclass(frozen=True)
class FetchFailure:
    """A URL that produced no outcome because its fetch task failed."""

    url: str
    error: BaseException

    @property
    def kind(self) -> str:
        """Class name of the error, e.g. ``"UnexpectedError"``."""
        return type(self.error).__name__


@dataclass
class CheckReport:
    """Everything the orchestrator learned about one batch of URLs."""

    entries: List[ReportEntry] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries) + len(self.failures)
