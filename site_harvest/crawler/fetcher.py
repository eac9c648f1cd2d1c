# site_harvest/crawler/fetcher.py
"""
Fetcher module: single HTTP GETs with a fixed user agent and timeout.

Every call returns either the fetched value or a :class:`FetchError`;
network problems never escape as exceptions. Failed fetches are not retried.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.models import FetchError, FetchErrorKind, FetchOutcome, Page
from site_harvest.logger import logger

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
XML_ACCEPT = "application/xml,text/xml,*/*"


class Fetcher:
    """Owns (or borrows) an aiohttp session and turns responses into outcomes."""

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> ClientSession:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session

    async def fetch(self, url: str) -> FetchOutcome:
        """
        GET an HTML page.

        Redirects are followed; the final response decides status and content
        type, while the returned Page keeps the requested *url*.
        """
        session = self._require_session()
        try:
            async with session.get(url, headers={"Accept": HTML_ACCEPT}, allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    return FetchError(url, FetchErrorKind.HTTP_STATUS, status=resp.status)
                ctype = resp.headers.get("Content-Type", "")
                if "text/html" not in ctype.lower():
                    return FetchError(
                        url, FetchErrorKind.UNSUPPORTED_TYPE, status=resp.status, detail=ctype
                    )
                html = await resp.text(errors="replace")
                return Page(url=url, html=html, status=resp.status)
        except asyncio.TimeoutError:
            return FetchError(url, FetchErrorKind.NETWORK, detail="timed out")
        except ClientError as exc:
            return FetchError(url, FetchErrorKind.NETWORK, detail=str(exc) or type(exc).__name__)

    async def fetch_document(self, url: str) -> Union[bytes, FetchError]:
        """GET a sitemap document; any 2xx body is accepted regardless of type."""
        session = self._require_session()
        try:
            async with session.get(url, headers={"Accept": XML_ACCEPT}, allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    return FetchError(url, FetchErrorKind.HTTP_STATUS, status=resp.status)
                return await resp.read()
        except asyncio.TimeoutError:
            return FetchError(url, FetchErrorKind.NETWORK, detail="timed out")
        except ClientError as exc:
            return FetchError(url, FetchErrorKind.NETWORK, detail=str(exc) or type(exc).__name__)


def log_failure(failure: FetchError) -> None:
    """Per-page failures are skipped; only their severity differs in the log."""
    if failure.kind is FetchErrorKind.NETWORK:
        logger.warning("Failed %s", failure)
    elif failure.kind is FetchErrorKind.HTTP_STATUS:
        logger.info("Skipped %s", failure)
    else:
        logger.debug("Skipped %s", failure)


__all__ = ["Fetcher", "log_failure", "HTML_ACCEPT", "XML_ACCEPT"]
