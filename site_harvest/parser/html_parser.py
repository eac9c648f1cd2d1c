# === FILE: site_harvest/parser/html_parser.py ===
"""Link scanning for fetched HTML pages.

The crawler only needs the raw ``href`` attribute values of a document, in
document order. Markup is tokenized with BeautifulSoup's ``html.parser``
backend, so ``href=`` text that lives inside comments, ``<script>`` bodies or
plain text is not mistaken for a link. Every tag carrying an ``href``
attribute counts (``<a>``, ``<link>``, ``<area>``, ...).

Targets that can never be pages are dropped here, before any URL
normalization happens:

* fragment-only references (``#top``)
* ``javascript:``, ``mailto:`` and ``tel:`` pseudo-URLs
* empty values
"""
from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("extract_links", "is_crawlable_href")

_SKIPPED_PREFIXES = ("#", "javascript:", "mailto:", "tel:")


def is_crawlable_href(href: str) -> bool:
    """Return False for hrefs that are never followed."""
    value = href.strip()
    return bool(value) and not value.lower().startswith(_SKIPPED_PREFIXES)


def extract_links(html: str) -> list[str]:
    """Return crawlable ``href`` values from *html*, unresolved, in order.

    Duplicates are kept; the frontier deduplicates after resolution.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    for tag in soup.find_all(href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        if is_crawlable_href(href_val):
            links.append(href_val.strip())
    return links
