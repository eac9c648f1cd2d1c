# File: site_harvest/parser/__init__.py
"""site_harvest.parser: Parsing of fetched HTML pages and sitemap documents."""

from .html_parser import extract_links, is_crawlable_href
from .sitemap_parser import SitemapDocument, parse_sitemap

__all__ = ["extract_links", "is_crawlable_href", "SitemapDocument", "parse_sitemap"]
