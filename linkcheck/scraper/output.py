"""Report writer: persists classified URLs as a Markdown-ish text file."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from linkcheck.errors import DestinationUnwritable
from linkcheck.scraper.models import ReportEntry


def format_entry(entry: ReportEntry) -> str:
    """Render *entry* as ``[<title or reason>] (<url>)``."""
    return f"[{entry.outcome}] ({entry.url})"


def write_report(path: Path | str, entries: Iterable[ReportEntry]) -> None:
    """Write one line per entry to *path*, replacing any existing file.

    Raises:
        DestinationUnwritable: If the file cannot be created or written.
    """
    path = Path(path)
    try:
        with path.open("w", encoding="utf-8") as fh:
            for entry in entries:
                fh.write(format_entry(entry) + "\n")
    except OSError as exc:
        raise DestinationUnwritable(path) from exc
