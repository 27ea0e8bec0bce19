"""Bounded concurrent fan-out/fan-in over a batch of URLs.

:func:`check_urls` launches one fetch task per URL, all gated by a single
:class:`~linkcheck.scraper.limiter.ConcurrencyLimiter`, and waits for every
task to finish before sealing the :class:`~linkcheck.scraper.models.CheckReport`.
Completed tasks are drained one at a time by this coroutine, which is the
only writer of the report.  A failing URL is recorded and never aborts the
rest of the batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Sequence, Tuple

import httpx

from linkcheck.config import Settings, settings as default_settings
from linkcheck.scraper.fetcher import NO_TITLE_PLACEHOLDER, build_client, fetch_outcome
from linkcheck.scraper.limiter import ConcurrencyLimiter
from linkcheck.scraper.models import CheckReport, FetchFailure, Outcome, ReportEntry

logger = logging.getLogger(__name__)

FetchFn = Callable[..., Awaitable[Outcome]]


async def check_urls(
    urls: Sequence[str],
    client: httpx.AsyncClient,
    *,
    concurrency: int | None = None,
    limiter: ConcurrencyLimiter | None = None,
    placeholder: str = NO_TITLE_PLACEHOLDER,
    fetch: FetchFn = fetch_outcome,
) -> CheckReport:
    """Fetch every URL in *urls* concurrently and classify the responses.

    Args:
        urls: Deduplicated URLs, in input order.
        client: Shared async HTTP client.
        concurrency: Permit count for a new limiter.  Ignored when *limiter*
            is given; defaults to ``settings.max_concurrency``.
        limiter: Pre-built limiter, e.g. to inspect ``peak`` afterwards.
        placeholder: Label for 2xx pages without a title.
        fetch: The per-URL task coroutine function.

    Returns:
        A report with one entry per classified URL and one failure per URL
        whose task raised or was cancelled, both in input order.
    """
    report = CheckReport()
    if not urls:
        return report

    if limiter is None:
        limiter = ConcurrencyLimiter(
            default_settings.max_concurrency if concurrency is None else concurrency
        )

    task_to_url: Dict[asyncio.Task, Tuple[int, str]] = {
        asyncio.create_task(
            fetch(url, limiter, client, placeholder=placeholder),
            name=f"fetch:{url}",
        ): (index, url)
        for index, url in enumerate(urls)
    }
    logger.debug("orchestrator: launched %d task(s), ceiling %d", len(task_to_url), limiter.capacity)

    entries: List[Tuple[int, ReportEntry]] = []
    failures: List[Tuple[int, FetchFailure]] = []

    pending = set(task_to_url)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                index, url = task_to_url[task]
                if task.cancelled():
                    error: BaseException = asyncio.CancelledError(f"fetch task for {url} was cancelled")
                else:
                    error = task.exception()
                if error is not None:
                    logger.warning("orchestrator: [%s] %s: %s", type(error).__name__, url, error)
                    failures.append((index, FetchFailure(url=url, error=error)))
                    continue
                entries.append((index, ReportEntry(url=url, outcome=task.result())))
    finally:
        # Only non-empty when the drain itself was interrupted, e.g. the caller cancelled us.
        if pending:
            logger.debug("orchestrator: cancelling %d unfinished task(s)", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    # Completion order is arbitrary; seal the report in input order.
    report.entries = [entry for _, entry in sorted(entries, key=lambda pair: pair[0])]
    report.failures = [failure for _, failure in sorted(failures, key=lambda pair: pair[0])]
    logger.info(
        "orchestrator: %d classified, %d failed (peak %d/%d in flight)",
        len(report.entries),
        len(report.failures),
        limiter.peak,
        limiter.capacity,
    )
    return report


async def run_check(
    urls: Sequence[str],
    settings: Settings | None = None,
    concurrency: int | None = None,
) -> CheckReport:
    """Build the shared client, check *urls*, and close the client."""
    settings = settings or default_settings
    ceiling = settings.max_concurrency if concurrency is None else concurrency
    async with build_client(settings, max_connections=ceiling) as client:
        return await check_urls(
            urls,
            client,
            concurrency=ceiling,
            placeholder=settings.no_title_placeholder,
        )
