"""Tests for the bounded concurrent fetch orchestrator.

Most tests swap in a fake ``fetch`` coroutine so timing and failures are
fully scripted.  The end-to-end scenarios use ``respx`` and
``httpx.MockTransport`` against the real :func:`fetch_outcome`.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from linkcheck.config import Settings
from linkcheck.errors import UnexpectedError
from linkcheck.scraper.limiter import ConcurrencyLimiter
from linkcheck.scraper.models import HttpFailure, ReportEntry, Success
from linkcheck.scraper.orchestrator import check_urls, run_check


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scripted_fetch(delays: dict[str, float], failures: dict[str, BaseException] | None = None):
    """Return a fake fetch that labels each URL with itself after a delay."""
    failures = failures or {}

    async def fetch(url, limiter, client, *, placeholder):
        async with limiter.permit():
            await asyncio.sleep(delays.get(url, 0))
            if url in failures:
                raise failures[url]
        return Success(label=f"title of {url}")

    return fetch


# ---------------------------------------------------------------------------
# Pairing and ordering
# ---------------------------------------------------------------------------

class TestPairing:
    async def test_empty_input_returns_empty_report(self) -> None:
        report = await check_urls([], client=None)
        assert report.entries == []
        assert report.failures == []
        assert report.total == 0

    async def test_entries_paired_and_in_input_order(self) -> None:
        urls = ["https://1.test", "https://2.test", "https://3.test", "https://4.test"]
        # Reverse completion order relative to input order.
        delays = {url: 0.04 - i * 0.01 for i, url in enumerate(urls)}

        report = await check_urls(urls, client=None, concurrency=4, fetch=_scripted_fetch(delays))

        assert [e.url for e in report.entries] == urls
        for entry in report.entries:
            assert entry.outcome == Success(label=f"title of {entry.url}")

    async def test_placeholder_is_forwarded(self) -> None:
        seen: list[str] = []

        async def fetch(url, limiter, client, *, placeholder):
            seen.append(placeholder)
            return Success(label=placeholder)

        await check_urls(["https://a.test"], client=None, placeholder="(none)", fetch=fetch)
        assert seen == ["(none)"]


# ---------------------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------------------

class TestFailureIsolation:
    async def test_unexpected_error_becomes_failure_not_entry(self) -> None:
        urls = ["https://a.test", "https://c.test", "https://b.test"]
        fetch = _scripted_fetch(
            {url: 0.01 for url in urls},
            failures={"https://c.test": UnexpectedError("https://c.test", "refused")},
        )

        report = await check_urls(urls, client=None, concurrency=2, fetch=fetch)

        assert [e.url for e in report.entries] == ["https://a.test", "https://b.test"]
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.url == "https://c.test"
        assert failure.kind == "UnexpectedError"
        assert report.total == len(urls)

    async def test_arbitrary_exception_is_contained(self) -> None:
        urls = ["https://a.test", "https://b.test"]
        fetch = _scripted_fetch({}, failures={"https://a.test": RuntimeError("bug")})

        report = await check_urls(urls, client=None, fetch=fetch)

        assert [e.url for e in report.entries] == ["https://b.test"]
        assert report.failures[0].kind == "RuntimeError"

    async def test_cancelled_task_is_recorded_as_failure(self) -> None:
        async def fetch(url, limiter, client, *, placeholder):
            if url == "https://gone.test":
                raise asyncio.CancelledError()
            return Success(label="ok")

        report = await check_urls(
            ["https://gone.test", "https://ok.test"], client=None, fetch=fetch
        )

        assert [e.url for e in report.entries] == ["https://ok.test"]
        assert [f.url for f in report.failures] == ["https://gone.test"]
        assert report.failures[0].kind == "CancelledError"

    async def test_every_url_accounted_for_exactly_once(self) -> None:
        urls = [f"https://{i}.test" for i in range(20)]
        failures = {url: UnexpectedError(url) for url in urls[::3]}
        fetch = _scripted_fetch({url: 0.001 * (i % 5) for i, url in enumerate(urls)}, failures)

        report = await check_urls(urls, client=None, concurrency=4, fetch=fetch)

        seen = [e.url for e in report.entries] + [f.url for f in report.failures]
        assert sorted(seen) == sorted(urls)
        assert len(seen) == len(set(seen))
        assert {f.url for f in report.failures} == set(failures)

    async def test_permits_all_returned_after_failures(self) -> None:
        limiter = ConcurrencyLimiter(2)
        urls = ["https://a.test", "https://b.test", "https://c.test"]
        fetch = _scripted_fetch(
            {url: 0.01 for url in urls},
            failures={"https://a.test": UnexpectedError("https://a.test")},
        )

        await check_urls(urls, client=None, limiter=limiter, fetch=fetch)

        assert limiter.in_use == 0


# ---------------------------------------------------------------------------
# Concurrency ceiling
# ---------------------------------------------------------------------------

class TestConcurrencyCeiling:
    async def test_ceiling_of_two_with_three_slow_urls(self) -> None:
        in_flight = 0
        observed_max = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, observed_max
            in_flight += 1
            observed_max = max(observed_max, in_flight)
            await asyncio.sleep(0.05)
            in_flight -= 1
            return httpx.Response(200, text=f"<title>{request.url.host}</title>")

        limiter = ConcurrencyLimiter(2)
        urls = ["https://a.test", "https://b.test", "https://c.test"]
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            report = await check_urls(urls, client, limiter=limiter)

        assert observed_max == 2
        assert limiter.peak == 2
        assert [str(e.outcome) for e in report.entries] == ["a.test", "b.test", "c.test"]

    @pytest.mark.parametrize("ceiling", [1, 3, 8])
    async def test_peak_never_exceeds_ceiling(self, ceiling: int) -> None:
        limiter = ConcurrencyLimiter(ceiling)
        urls = [f"https://{i}.test" for i in range(16)]
        fetch = _scripted_fetch({url: 0.005 for url in urls})

        report = await check_urls(urls, client=None, limiter=limiter, fetch=fetch)

        assert limiter.peak == ceiling
        assert len(report.entries) == 16


# ---------------------------------------------------------------------------
# End-to-end with respx
# ---------------------------------------------------------------------------

class TestScenarios:
    async def test_success_http_failure_and_unreachable(self) -> None:
        urls = ["https://a.test", "https://b.test", "https://c.test"]
        with respx.mock:
            respx.get("https://a.test/").mock(
                return_value=httpx.Response(200, text="<html><title>Hi</title></html>")
            )
            respx.get("https://b.test/").mock(return_value=httpx.Response(404))
            respx.get("https://c.test/").mock(side_effect=httpx.ConnectError)
            report = await run_check(urls, Settings(), concurrency=2)

        assert report.entries == [
            ReportEntry(url="https://a.test", outcome=Success(label="Hi")),
            ReportEntry(url="https://b.test", outcome=HttpFailure(status_code=404, reason="Not Found")),
        ]
        assert [(f.kind, f.url) for f in report.failures] == [("UnexpectedError", "https://c.test")]

    async def test_run_check_uses_settings_placeholder(self) -> None:
        with respx.mock:
            respx.get("https://a.test/").mock(return_value=httpx.Response(200, text="<p>x</p>"))
            report = await run_check(["https://a.test"], Settings(no_title_placeholder="-"))

        assert report.entries[0].outcome == Success(label="-")


# ---------------------------------------------------------------------------
# Caller-side cancellation and ceiling validation
# ---------------------------------------------------------------------------

class TestCallerControl:
    async def test_zero_concurrency_is_rejected(self) -> None:
        fetch = _scripted_fetch({})
        with pytest.raises(ValueError):
            await check_urls(["https://a.test"], client=None, concurrency=0, fetch=fetch)

    async def test_run_check_zero_concurrency_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            await run_check(["https://a.test"], Settings(), concurrency=0)

    async def test_cancelling_caller_cancels_running_fetches(self) -> None:
        started = asyncio.Event()
        cancelled: list[str] = []

        async def fetch(url, limiter, client, *, placeholder):
            async with limiter.permit():
                started.set()
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    cancelled.append(url)
                    raise
            return Success(label="never")

        limiter = ConcurrencyLimiter(2)
        urls = ["https://a.test", "https://b.test", "https://c.test"]
        caller = asyncio.create_task(check_urls(urls, client=None, limiter=limiter, fetch=fetch))
        await started.wait()
        await asyncio.sleep(0)

        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        assert sorted(cancelled) == ["https://a.test", "https://b.test"]
        assert limiter.in_use == 0
        assert all(task.done() for task in asyncio.all_tasks() if task.get_name().startswith("fetch:"))
