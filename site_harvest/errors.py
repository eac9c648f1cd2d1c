# File: site_harvest/errors.py
"""site_harvest.errors: Invocation-level exceptions of the crawl engine.

Per-page failures are not exceptions: the fetcher returns
:class:`~site_harvest.crawler.models.FetchError` values instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = ["CrawlError", "InvalidURLError", "SitemapFetchError", "EmptyResultError"]


class CrawlError(Exception):
    """Base class for errors that abort a whole crawl invocation."""

    summary: str = "Failed to crawl website"

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.summary}
        message = str(self)
        if message:
            payload["message"] = message
        return payload


class InvalidURLError(CrawlError, ValueError):
    """A seed or candidate URL could not be parsed."""

    summary = "Invalid URL"


class SitemapFetchError(CrawlError):
    """The root sitemap document could not be retrieved."""

    summary = "Failed to fetch sitemap"

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.status is not None:
            payload["status"] = self.status
        return payload


class EmptyResultError(CrawlError):
    """A crawl finished without retrieving a single page."""

    summary = "No pages could be crawled"
