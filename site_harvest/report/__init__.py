# File: site_harvest/report/__init__.py
"""site_harvest.report: Export of crawl results for the CLI."""

from .json_report import render_json

__all__ = ["render_json"]
