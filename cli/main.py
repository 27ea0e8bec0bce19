"""linkcheck CLI: check every URL in a text file and write a report.

Usage:
    linkcheck INPUT OUTPUT [--concurrency N] [--timeout SECONDS] [--verbose]
    python cli/main.py INPUT OUTPUT

Each report line reads ``[<title or HTTP reason>] (<url>)``.  URLs that fail
below HTTP (DNS, connection, TLS, timeout, malformed URL) are left out of the
report and printed to stderr as ``[UnexpectedError] <url>``.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkcheck.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from dataclasses import replace
from typing import Optional

import typer

from linkcheck.config import settings
from linkcheck.errors import DestinationUnwritable, SourceError
from linkcheck.scraper import extract_urls_from_file, run_check, write_report

USAGE = "Usage: linkcheck <input_file> <output_file>"

app = typer.Typer(
    name="linkcheck",
    help="Fetch every URL in a file and report page titles or HTTP errors.",
    add_completion=False,
)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": False},
)
def check(
    ctx: typer.Context,
    input_path: Optional[Path] = typer.Argument(None, help="Text file containing URLs."),
    output_path: Optional[Path] = typer.Argument(None, help="Report file to write."),
    concurrency: int = typer.Option(
        settings.max_concurrency,
        "--concurrency",
        "-c",
        min=1,
        help="Maximum number of requests in flight at once.",
    ),
    timeout: float = typer.Option(
        settings.request_timeout,
        "--timeout",
        help="Per-request timeout in seconds.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Check the URLs in INPUT and write the report to OUTPUT."""
    if input_path is None or output_path is None or ctx.args:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        urls = extract_urls_from_file(input_path)
    except SourceError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[check] {len(urls)} unique URL(s) from {input_path} (concurrency={concurrency})")

    run_settings = replace(settings, max_concurrency=concurrency, request_timeout=timeout)
    report = asyncio.run(run_check(urls, run_settings, concurrency=concurrency))

    for failure in report.failures:
        typer.echo(f"[{failure.kind}] {failure.url}", err=True)

    try:
        write_report(output_path, report.entries)
    except DestinationUnwritable as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"[check] Wrote {len(report.entries)} entr{'y' if len(report.entries) == 1 else 'ies'} "
        f"to {output_path} ({len(report.failures)} failed)"
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
