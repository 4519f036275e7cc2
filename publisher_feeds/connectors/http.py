"""HTTP feed fetcher: one bounded-time GET per feed URL."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from publisher_feeds.utils.logging import get_logger

from .base import FetchError

FEED_ACCEPT = "application/rss+xml, application/atom+xml, text/xml, */*"

logger = get_logger(__name__)


class HttpFeedFetcher:
    """Fetch raw feed documents.

    A failed fetch never propagates: timeouts, transport errors and non-2xx
    responses are logged and reported as "no content" so the run moves on to
    the next feed. There is exactly one attempt per URL per run.
    """

    def __init__(self, *, user_agent: str, timeout_seconds: float = 15.0) -> None:
        self._timeout = float(timeout_seconds)
        self._headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": FEED_ACCEPT,
        }

    def fetch(self, url: str) -> Optional[str]:
        try:
            return self._get(url)
        except FetchError as exc:
            logger.warning(
                "feeds.fetch.failed",
                extra={"url": exc.url, "status_code": exc.status_code, "reason": str(exc)},
            )
            return None

    def _get(self, url: str) -> str:
        try:
            resp = httpx.get(url, headers=self._headers, timeout=self._timeout, follow_redirects=True)
        except httpx.TimeoutException as exc:
            raise FetchError(url, f"timeout after {self._timeout:g}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, f"transport error: {exc}") from exc

        if not resp.is_success:
            raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)
        return resp.text
