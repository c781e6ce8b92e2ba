"""Where: src/classitag/features/extraction/adapters/requests_fetcher.py
What: HTMLFetcherPort implementation over a requests session with retry on throttling.
Why: Decouple network concerns from page parsing.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import override

import requests

from classitag import __version__
from classitag.features.extraction.domain import SourceReadError
from classitag.features.extraction.usecases.ports import FetchResult, HTMLFetcherPort
from classitag.platform.logging import logger


class RequestsHTMLFetcher(HTMLFetcherPort):
    """GET catalogue pages, retrying 429 and 5xx responses."""

    def __init__(
        self,
        timeout: float = 15.0,
        max_attempts: int = 2,
        user_agent: str = f"classitag/{__version__}",
        session: requests.Session | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._session = session or requests.Session()
        self._headers = {
            "Accept": "text/html,application/xhtml+xml",
            "User-Agent": user_agent,
        }

    @override
    def fetch(self, url: str) -> FetchResult:
        result = FetchResult(status=0, body=b"")
        for attempt in range(self._max_attempts):
            try:
                response = self._session.get(url, headers=self._headers, timeout=self._timeout)
            except requests.RequestException as exc:
                logger.warning("Request to %s failed: %s", url, exc)
                raise SourceReadError(f"could not fetch {url}: {exc}") from exc

            headers = {str(key): str(value) for key, value in response.headers.items()}
            result = FetchResult(status=int(response.status_code), body=response.content, headers=headers)
            if not self._should_retry(result.status):
                return result

            if attempt < self._max_attempts - 1:
                delay = self._retry_delay(headers)
                logger.warning(
                    "Throttled or server error (status=%s) for %s. Retrying in %.1fs.",
                    result.status,
                    url,
                    delay,
                )
                time.sleep(delay)
                continue
            logger.warning("Giving up on %s after %d attempt(s) (status=%s)", url, attempt + 1, result.status)
        return result

    @staticmethod
    def _should_retry(status: int) -> bool:
        return status == 429 or status >= 500

    @staticmethod
    def _retry_delay(headers: dict[str, str]) -> float:
        retry_after = _parse_retry_after(headers.get("Retry-After"))
        return max(1.0, min(10.0, retry_after or 1.0))


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    stripped = value.strip()
    if stripped.isdigit():
        return float(int(stripped))
    try:
        dt = parsedate_to_datetime(stripped)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return max(0.0, (dt - datetime.now(timezone.utc)).total_seconds())


__all__ = ["RequestsHTMLFetcher"]
