# === FILE: site_harvest/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable, Deque, FrozenSet, List, Optional, Set

from site_harvest.crawler.fetcher import Fetcher, log_failure
from site_harvest.crawler.models import CrawlState, CrawlTarget, FetchError, FetchOutcome, Page
from site_harvest.errors import InvalidURLError
from site_harvest.logger import logger
from site_harvest.parser.html_parser import extract_links
from site_harvest.utils import resolve_link, same_origin

__all__ = ("FrontierCrawler", "ProgressCallback")

ProgressCallback = Callable[[Page, int], None]


class FrontierCrawler:
    """
    Breadth-first crawl of one site, bounded by a page budget.

    One instance is one crawl: it owns the frontier and the visited set and
    can be run once. With ``concurrency > 1`` several workers drain the same
    frontier; the visited check and the budget are shared between them.
    """

    def __init__(
        self,
        target: CrawlTarget,
        fetcher: Fetcher,
        max_pages: int = 50,
        concurrency: int = 1,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.target = target
        self.fetcher = fetcher
        self.max_pages = max_pages
        self.concurrency = concurrency
        self.on_progress = on_progress
        self.state = CrawlState.IDLE
        self._frontier: Deque[str] = deque()
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()
        self._pages: List[Page] = []
        self._in_flight = 0
        self._wakeup = asyncio.Condition()

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def pages(self) -> List[Page]:
        return list(self._pages)

    async def crawl(self, deadline: Optional[float] = None) -> List[Page]:
        """Run the crawl; on *deadline* (seconds) return what was collected."""
        if self.state is not CrawlState.IDLE:
            raise RuntimeError("FrontierCrawler instances run only once")
        self.state = CrawlState.RUNNING
        self._enqueue(self.target.url)
        logger.info("Crawl started: %s (max %d pages)", self.target.url, self.max_pages)
        start = time.monotonic()

        workers = [asyncio.create_task(self._worker()) for _ in range(self.concurrency)]
        try:
            await asyncio.wait_for(asyncio.gather(*workers), timeout=deadline)
        except asyncio.TimeoutError:
            self.state = CrawlState.DRAINING
            logger.warning(
                "Crawl deadline of %.1f s reached, returning %d pages", deadline, len(self._pages)
            )
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            self.state = CrawlState.COMPLETED

        duration = time.monotonic() - start
        logger.info(
            "Crawl finished: %d pages, %d visited, %d left in frontier, %.2f s",
            len(self._pages), len(self._visited), len(self._frontier), duration,
        )
        return list(self._pages)

    # Frontier bookkeeping. Only called while holding self._wakeup or before
    # the workers start, so check-and-mark sequences are atomic.

    def _enqueue(self, url: str) -> bool:
        if url in self._visited or url in self._queued:
            return False
        self._frontier.append(url)
        self._queued.add(url)
        return True

    def _has_budget(self) -> bool:
        return len(self._pages) + self._in_flight < self.max_pages

    def _finished(self) -> bool:
        if len(self._pages) >= self.max_pages:
            return True
        return not self._frontier and self._in_flight == 0

    def _can_proceed(self) -> bool:
        return self._finished() or (bool(self._frontier) and self._has_budget())

    async def _worker(self) -> None:
        while True:
            async with self._wakeup:
                await self._wakeup.wait_for(self._can_proceed)
                if self._finished():
                    self._wakeup.notify_all()
                    return
                url = self._frontier.popleft()
                self._queued.discard(url)
                if url in self._visited:
                    continue
                self._visited.add(url)
                self._in_flight += 1

            outcome = await self.fetcher.fetch(url)

            async with self._wakeup:
                self._in_flight -= 1
                self._absorb(outcome)
                self._wakeup.notify_all()

    def _absorb(self, outcome: FetchOutcome) -> None:
        if isinstance(outcome, FetchError):
            log_failure(outcome)
            return
        self._pages.append(outcome)
        logger.debug("Fetched %s (%d/%d)", outcome.url, len(self._pages), self.max_pages)
        if self.on_progress is not None:
            self.on_progress(outcome, len(self._pages))
        added = 0
        for href in extract_links(outcome.html):
            try:
                link = resolve_link(href, self.target.url)
            except InvalidURLError:
                logger.debug("Skipping malformed link %r on %s", href, outcome.url)
                continue
            if not same_origin(link, self.target.url):
                continue
            if self._enqueue(link):
                added += 1
        if added:
            logger.debug("Queued %d new links from %s", added, outcome.url)
