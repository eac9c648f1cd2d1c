# File: site_harvest/crawler/__init__.py
"""site_harvest.crawler: Fetching, breadth-first traversal and sitemap resolution."""

from .models import CrawlState, CrawlTarget, FetchError, FetchErrorKind, Page

__all__ = ["CrawlState", "CrawlTarget", "FetchError", "FetchErrorKind", "Page"]
