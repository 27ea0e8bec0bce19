"""Async HTTP fetch-and-classify for a single URL.

One call to :func:`fetch_outcome` is one fetch task:

``Pending -> PermitAcquired -> ResponseReceived -> Classified | TransportFailed``

A classified task returns an :data:`Outcome`; a transport-failed task raises
:class:`~linkcheck.errors.UnexpectedError`.
"""

from __future__ import annotations

import logging

import httpx

from linkcheck.config import Settings, settings as default_settings
from linkcheck.errors import LimiterClosed, UnexpectedError
from linkcheck.scraper.extractor import extract_title
from linkcheck.scraper.limiter import ConcurrencyLimiter
from linkcheck.scraper.models import HttpFailure, Outcome, Success

logger = logging.getLogger(__name__)

NO_TITLE_PLACEHOLDER = "No title found"


# ---------------------------------------------------------------------------
# Shared client
# ---------------------------------------------------------------------------


def build_client(
    settings: Settings | None = None,
    max_connections: int | None = None,
) -> httpx.AsyncClient:
    """Return the :class:`httpx.AsyncClient` shared by every task in a run.

    The connection pool is capped at *max_connections* (the concurrency
    ceiling) so idle sockets never outnumber the permits that can use them.
    """
    settings = settings or default_settings
    pool_size = settings.max_concurrency if max_connections is None else max_connections
    return httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=settings.follow_redirects,
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=pool_size,
            max_keepalive_connections=pool_size,
        ),
    )


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------


def reason_for_status(status_code: int) -> str:
    """Canonical reason phrase for *status_code*, or the bare number."""
    return httpx.codes.get_reason_phrase(status_code) or str(status_code)


# ---------------------------------------------------------------------------
# Public fetch function
# ---------------------------------------------------------------------------


async def fetch_outcome(
    url: str,
    limiter: ConcurrencyLimiter,
    client: httpx.AsyncClient,
    *,
    placeholder: str = NO_TITLE_PLACEHOLDER,
) -> Outcome:
    """Fetch *url* under one permit from *limiter* and classify the result.

    The permit covers the request and the body read, and is returned before
    the title is parsed.

    Args:
        url: Target URL.  Not validated before the request is issued.
        limiter: Shared concurrency limiter for the run.
        client: Shared async HTTP client.
        placeholder: Label used for 2xx pages without a usable title.

    Returns:
        :class:`Success` for a 2xx response, :class:`HttpFailure` otherwise.

    Raises:
        UnexpectedError: On any transport-level failure, a body read
            failure, or if no permit could be obtained.
    """
    try:
        async with limiter.permit():
            logger.debug("fetch: GET %s (%d/%d permits)", url, limiter.in_use, limiter.capacity)
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    logger.debug("fetch: %s -> HTTP %d", url, response.status_code)
                    return HttpFailure(
                        status_code=response.status_code,
                        reason=reason_for_status(response.status_code),
                    )
                await response.aread()
                html = response.text
    except LimiterClosed as exc:
        raise UnexpectedError(url, str(exc)) from exc
    except httpx.InvalidURL as exc:
        raise UnexpectedError(url, f"invalid url: {exc}") from exc
    except httpx.TimeoutException as exc:
        raise UnexpectedError(url, "timeout") from exc
    except httpx.HTTPError as exc:
        raise UnexpectedError(url, f"{type(exc).__name__}: {exc}") from exc

    logger.debug("fetch: %s -> HTTP %d, %d chars", url, response.status_code, len(html))
    return Success(label=extract_title(html) or placeholder)
