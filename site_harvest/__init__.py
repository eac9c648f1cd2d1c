# site_harvest/__init__.py
"""
SiteHarvest package initializer.
Defines package version and exposes the crawl entry points.
The command line lives in :mod:`site_harvest.cli`.
"""
__version__ = "0.1.0"

from site_harvest.aggregator import CrawlResult
from site_harvest.engine import crawl_site, crawl_sitemap, crawl_website

__all__ = ["__version__", "CrawlResult", "crawl_site", "crawl_sitemap", "crawl_website"]
