"""URL extraction: turns an input text file into an ordered list of URLs."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from linkcheck.errors import SourceNotFound, SourceUnreadable

# Stops at whitespace and at the closing bracket of Markdown link syntax.
_URL_PATTERN = re.compile(r"https?://[^\s)\]]+")


def extract_urls(text: str) -> List[str]:
    """Return every URL in *text*, deduplicated, in first-seen order."""
    seen: set[str] = set()
    urls: List[str] = []
    for match in _URL_PATTERN.finditer(text):
        url = match.group(0)
        if url not in seen:
            seen.add(url)
            urls.append(url)
    return urls


def read_source(path: Path | str) -> str:
    """Read the input file at *path* as UTF-8 text.

    Raises:
        SourceNotFound: If *path* does not exist.
        SourceUnreadable: If *path* exists but cannot be read or decoded.
    """
    path = Path(path)
    if not path.exists():
        raise SourceNotFound(path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnreadable(path) from exc


def extract_urls_from_file(path: Path | str) -> List[str]:
    """Read *path* and return the unique URLs it mentions."""
    return extract_urls(read_source(path))
