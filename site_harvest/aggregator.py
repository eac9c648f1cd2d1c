# File: site_harvest/aggregator.py
"""site_harvest.aggregator: Assembles fetched pages into the crawl result."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from site_harvest.crawler.models import Page
from site_harvest.crawler.sitemap import SitemapResolution
from site_harvest.errors import CrawlError


@dataclass(slots=True)
class CrawlResult:
    """Pages of one crawl, in fetch order, plus sitemap metadata when relevant."""

    base_url: str
    pages: List[Page] = field(default_factory=list)
    total_urls_in_sitemap: Optional[int] = None
    is_sitemap_index: Optional[bool] = None

    @property
    def from_sitemap(self) -> bool:
        return self.total_urls_in_sitemap is not None

    def to_dict(self) -> Dict[str, Any]:
        """Invocation output shape shared by the CLI and JSON export."""
        data: Dict[str, Any] = {"success": True}
        if self.from_sitemap:
            data["sitemapUrl"] = self.base_url
            data["totalUrlsFound"] = self.total_urls_in_sitemap
            data["pagesCount"] = len(self.pages)
            data["isSitemapIndex"] = bool(self.is_sitemap_index)
        else:
            data["baseUrl"] = self.base_url
            data["pagesCount"] = len(self.pages)
        data["pages"] = [p.to_dict() for p in self.pages]
        return data

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def build_site_result(base_url: str, pages: Sequence[Page]) -> CrawlResult:
    return CrawlResult(base_url=base_url, pages=list(pages))


def build_sitemap_result(resolution: SitemapResolution, pages: Sequence[Page]) -> CrawlResult:
    return CrawlResult(
        base_url=resolution.sitemap_url,
        pages=list(pages),
        total_urls_in_sitemap=resolution.total_urls,
        is_sitemap_index=resolution.is_index,
    )


SITE_FAILURE = "Failed to crawl website"
SITEMAP_FAILURE = "Failed to process sitemap"


def error_payload(exc: BaseException, summary: str = SITE_FAILURE) -> Dict[str, Any]:
    """``{error, message?}`` for an invocation-level failure.

    *summary* labels unexpected exceptions; a CrawlError carries its own.
    """
    if isinstance(exc, CrawlError):
        return exc.to_payload()
    return {"error": summary, "message": str(exc) or type(exc).__name__}


__all__ = [
    "CrawlResult",
    "SITEMAP_FAILURE",
    "SITE_FAILURE",
    "build_site_result",
    "build_sitemap_result",
    "error_payload",
]
