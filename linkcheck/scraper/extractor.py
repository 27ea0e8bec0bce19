"""Title extraction from fetched HTML documents."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup


def extract_title(html: str) -> str | None:
    """Return the trimmed text of the first ``<title>`` element.

    Returns ``None`` when the document has no title, the title is blank, or
    the parser rejects the markup outright.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup:
        return None

    tag = soup.find("title")
    if tag is None:
        return None
    title = tag.get_text().strip()
    return title or None
