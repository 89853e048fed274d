"""HTTP client for the crawler service that scrapes contact pages.

Scraping is best-effort: every failure comes back as an error-valued
CrawlResult instead of an exception, and nothing is retried.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrawlResult:
    """Either the scraped contact fields or the reason the crawl failed."""

    data: dict[str, Any] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    def unwrap_or(self, default: dict[str, Any]) -> dict[str, Any]:
        return self.data if self.ok else default


class CrawlerClient:
    """Posts a URL to the crawler service and returns the scraped contact."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self._url = (base_url if base_url is not None else settings.CRAWLER_SERVICE_URL).rstrip("/")
        read_timeout = timeout if timeout is not None else settings.CRAWLER_TIMEOUT_SECONDS
        self._client = httpx.Client(timeout=httpx.Timeout(float(read_timeout)))

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    def close(self):
        self._client.close()

    def resolve(self, url: str) -> CrawlResult:
        if not self.is_configured:
            return CrawlResult(error="Crawler service not configured")

        try:
            resp = self._client.post(self._url, json={"url": url})
        except httpx.TimeoutException as e:
            logger.warning("Crawler timed out: %s", e)
            return CrawlResult(error=f"Crawler timed out: {e}")
        except httpx.InvalidURL as e:
            logger.warning("Crawler URL is invalid: %s", e)
            return CrawlResult(error=f"Crawler URL is invalid: {e}")
        except httpx.HTTPError as e:
            logger.warning("Crawler request failed: %s", e)
            return CrawlResult(error=f"Crawler request failed: {e}")

        if resp.status_code != 200:
            logger.warning("Crawler returned HTTP %d", resp.status_code)
            return CrawlResult(error=f"Crawler returned HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            logger.warning("Crawler returned a non-JSON body")
            return CrawlResult(error="Crawler returned a non-JSON body")

        if not isinstance(body, dict) or body.get("success") is not True:
            return CrawlResult(error="Crawler reported failure")

        data = body.get("data")
        if not isinstance(data, dict):
            return CrawlResult(error="Crawler response has no contact data")

        return CrawlResult(data=data)
