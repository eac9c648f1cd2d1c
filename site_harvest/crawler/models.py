# site_harvest/crawler/models.py
"""
Data models for the SiteHarvest crawler.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """Normalized seed of a crawl."""

    url: str
    scheme: str
    hostname: str


@dataclass(frozen=True, slots=True)
class Page:
    """Successfully fetched HTML page, keyed by the URL that was requested."""

    url: str
    html: str
    status: int

    def to_dict(self) -> dict:
        return {"url": self.url, "html": self.html, "status": self.status}


class FetchErrorKind(str, enum.Enum):
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    UNSUPPORTED_TYPE = "unsupported_type"


@dataclass(frozen=True, slots=True)
class FetchError:
    """Why a single fetch produced no page. Returned, never raised."""

    url: str
    kind: FetchErrorKind
    status: Optional[int] = None
    detail: str = ""

    def __str__(self) -> str:
        if self.kind is FetchErrorKind.HTTP_STATUS:
            return f"{self.url}: HTTP {self.status}"
        if self.kind is FetchErrorKind.UNSUPPORTED_TYPE:
            return f"{self.url}: unsupported content type {self.detail!r}"
        return f"{self.url}: {self.detail or 'network error'}"


FetchOutcome = Union[Page, FetchError]


class CrawlState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    COMPLETED = "completed"
