# File: site_harvest/parser/sitemap_parser.py
"""site_harvest.parser.sitemap_parser: Parsing of sitemap.xml / sitemap index documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from lxml import etree

__all__ = ["SitemapDocument", "parse_sitemap"]


@dataclass(slots=True)
class SitemapDocument:
    """Values of the ``<loc>`` elements and whether the root is ``<sitemapindex>``."""

    locs: List[str] = field(default_factory=list)
    is_index: bool = False


def parse_sitemap(xml_content: Union[str, bytes]) -> SitemapDocument:
    """Extract ``<loc>`` text values and classify the document.

    Args:
        xml_content: raw sitemap body. Bytes are preferred so that the XML
            encoding declaration is honoured.

    Returns:
        SitemapDocument; empty when the body is not XML at all.

    Example:
    ```python
    doc = parse_sitemap(b"<urlset><url><loc>https://a.test/</loc></url></urlset>")
    assert doc.locs == ["https://a.test/"] and not doc.is_index
    ```
    """
    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")
    if not xml_content.strip():
        return SitemapDocument()

    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_content, parser=parser)
    except etree.XMLSyntaxError:
        return SitemapDocument()
    if root is None:
        return SitemapDocument()

    locs = [loc.text.strip() for loc in root.iterfind(".//{*}loc") if loc.text and loc.text.strip()]
    is_index = isinstance(root.tag, str) and etree.QName(root).localname == "sitemapindex"
    return SitemapDocument(locs=locs, is_index=is_index)
