# site_harvest/crawler/sitemap.py
"""
Sitemap mode: resolve a sitemap (or a one-level sitemap index) into a flat
list of page URLs, then fetch the listed pages without link discovery.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from site_harvest.crawler.fetcher import Fetcher, log_failure
from site_harvest.crawler.models import FetchError, Page
from site_harvest.errors import SitemapFetchError
from site_harvest.logger import logger
from site_harvest.parser.sitemap_parser import parse_sitemap
from site_harvest.utils import remove_duplicates

MAX_CHILD_SITEMAPS = 5


@dataclass(slots=True)
class SitemapResolution:
    """Outcome of resolving a sitemap URL.

    ``urls`` is already cut to the page budget, ``total_urls`` is not.
    """

    sitemap_url: str
    urls: List[str] = field(default_factory=list)
    total_urls: int = 0
    is_index: bool = False


class SitemapResolver:
    """Fetches a sitemap and, for an index, up to ``max_child_sitemaps`` children."""

    def __init__(self, fetcher: Fetcher, max_child_sitemaps: int = MAX_CHILD_SITEMAPS) -> None:
        self.fetcher = fetcher
        self.max_child_sitemaps = max_child_sitemaps

    async def resolve(self, sitemap_url: str, max_pages: int) -> SitemapResolution:
        body = await self.fetcher.fetch_document(sitemap_url)
        if isinstance(body, FetchError):
            raise SitemapFetchError(str(body), status=body.status)

        document = parse_sitemap(body)
        logger.info(
            "Sitemap %s: %d <loc> entries%s",
            sitemap_url, len(document.locs), " (index)" if document.is_index else "",
        )

        if document.is_index:
            found: List[str] = []
            for child_url in document.locs[: self.max_child_sitemaps]:
                found.extend(await self._resolve_child(child_url))
        else:
            found = document.locs

        # The total counts every listed <loc>; only the fetch list is deduplicated.
        urls = remove_duplicates(found)
        return SitemapResolution(
            sitemap_url=sitemap_url,
            urls=urls[:max_pages],
            total_urls=len(found),
            is_index=document.is_index,
        )

    async def _resolve_child(self, child_url: str) -> List[str]:
        body = await self.fetcher.fetch_document(child_url)
        if isinstance(body, FetchError):
            logger.warning("Failed to fetch child sitemap %s", body)
            return []
        # Children are read as plain url lists; nested indexes are not followed.
        return parse_sitemap(body).locs


async def fetch_pages(
    fetcher: Fetcher,
    urls: List[str],
    concurrency: int = 1,
    deadline: Optional[float] = None,
    on_progress: Optional[Callable[[Page, int], None]] = None,
) -> List[Page]:
    """Fetch every URL in *urls*; failures are skipped, order is preserved.

    On *deadline* (seconds) the pages fetched so far are returned.
    """
    slots = asyncio.Semaphore(concurrency)
    fetched: Dict[int, Page] = {}

    async def _one(index: int, url: str) -> None:
        async with slots:
            outcome = await fetcher.fetch(url)
        if isinstance(outcome, FetchError):
            log_failure(outcome)
            return
        fetched[index] = outcome
        if on_progress is not None:
            on_progress(outcome, len(fetched))

    tasks = [asyncio.create_task(_one(i, url)) for i, url in enumerate(urls)]
    try:
        await asyncio.wait_for(asyncio.gather(*tasks), timeout=deadline)
    except asyncio.TimeoutError:
        logger.warning("Sitemap fetch deadline reached, returning %d pages", len(fetched))
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    return [fetched[i] for i in sorted(fetched)]


__all__ = ["MAX_CHILD_SITEMAPS", "SitemapResolution", "SitemapResolver", "fetch_pages"]
