# File: site_harvest/engine.py
"""site_harvest.engine: Invocation layer. Starts a crawl in either mode and returns a CrawlResult."""

from __future__ import annotations

import time
from typing import Optional

from site_harvest.aggregator import CrawlResult, build_site_result, build_sitemap_result
from site_harvest.config import CrawlerConfig
from site_harvest.crawler.crawler import FrontierCrawler, ProgressCallback
from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.sitemap import SitemapResolver, fetch_pages
from site_harvest.errors import EmptyResultError, InvalidURLError
from site_harvest.logger import logger
from site_harvest.utils import make_target, normalize_url

__all__ = ["crawl_site", "crawl_sitemap", "crawl_website"]


async def crawl_site(
    seed_url: str,
    max_pages: Optional[int] = None,
    config: Optional[CrawlerConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CrawlResult:
    """Breadth-first crawl starting at *seed_url*.

    Raises InvalidURLError for an unusable seed and EmptyResultError when no
    page could be retrieved. Per-page failures never surface here.
    """
    cfg = config or CrawlerConfig()
    target = make_target(seed_url)
    budget = max_pages if max_pages is not None else cfg.max_pages

    async with Fetcher(cfg) as fetcher:
        crawler = FrontierCrawler(
            target,
            fetcher,
            max_pages=budget,
            concurrency=cfg.concurrency,
            on_progress=on_progress,
        )
        pages = await crawler.crawl(deadline=cfg.scan_timeout)

    if not pages:
        raise EmptyResultError(f"No pages could be retrieved from {target.url}")
    return build_site_result(target.url, pages)


async def crawl_sitemap(
    sitemap_url: str,
    max_pages: Optional[int] = None,
    config: Optional[CrawlerConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CrawlResult:
    """Fetch the pages listed by a sitemap or a sitemap index.

    Raises SitemapFetchError when the sitemap itself is unreachable.
    """
    cfg = config or CrawlerConfig()
    url = normalize_url(sitemap_url)
    budget = max_pages if max_pages is not None else cfg.sitemap_max_pages
    start = time.monotonic()

    async with Fetcher(cfg) as fetcher:
        resolver = SitemapResolver(fetcher, max_child_sitemaps=cfg.max_child_sitemaps)
        resolution = await resolver.resolve(url, budget)
        logger.info(
            "Sitemap resolved: %d URLs found, fetching %d", resolution.total_urls, len(resolution.urls)
        )
        deadline = None
        if cfg.scan_timeout is not None:
            deadline = max(0.0, cfg.scan_timeout - (time.monotonic() - start))
        pages = await fetch_pages(
            fetcher,
            resolution.urls,
            concurrency=cfg.concurrency,
            deadline=deadline,
            on_progress=on_progress,
        )

    if not pages:
        raise EmptyResultError(
            f"No pages could be retrieved from {len(resolution.urls)} sitemap URLs"
        )
    return build_sitemap_result(resolution, pages)


async def crawl_website(
    url: Optional[str] = None,
    max_pages: Optional[int] = None,
    use_sitemap: bool = False,
    sitemap_url: Optional[str] = None,
    config: Optional[CrawlerConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CrawlResult:
    """Pick sitemap mode when asked for and a sitemap URL is known, BFS otherwise."""
    if use_sitemap and sitemap_url:
        return await crawl_sitemap(sitemap_url, max_pages, config, on_progress)
    if not url:
        raise InvalidURLError("URL is required")
    return await crawl_site(url, max_pages, config, on_progress)
