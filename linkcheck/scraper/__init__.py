"""Scraper package: URL extraction, bounded concurrent fetch, reporting."""

from linkcheck.scraper.extractor import extract_title
from linkcheck.scraper.fetcher import build_client, fetch_outcome
from linkcheck.scraper.limiter import ConcurrencyLimiter
from linkcheck.scraper.models import (
    CheckReport,
    FetchFailure,
    HttpFailure,
    Outcome,
    ReportEntry,
    Success,
)
from linkcheck.scraper.orchestrator import check_urls, run_check
from linkcheck.scraper.output import format_entry, write_report
from linkcheck.scraper.parser import extract_urls, extract_urls_from_file, read_source

__all__ = [
    "CheckReport",
    "ConcurrencyLimiter",
    "FetchFailure",
    "HttpFailure",
    "Outcome",
    "ReportEntry",
    "Success",
    "build_client",
    "check_urls",
    "extract_title",
    "extract_urls",
    "extract_urls_from_file",
    "fetch_outcome",
    "format_entry",
    "read_source",
    "run_check",
    "write_report",
]
