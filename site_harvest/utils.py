# File: site_harvest/utils.py
"""site_harvest.utils: URL normalization, origin scoping and small list helpers."""

from __future__ import annotations

import re
from typing import Collection, List, Sequence
from urllib.parse import urldefrag, urljoin, urlsplit

from site_harvest.crawler.models import CrawlTarget
from site_harvest.errors import InvalidURLError
from site_harvest.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "resolve_link",
    "same_origin",
    "extract_hostname",
    "make_target",
    "remove_duplicates",
)

_SCHEMES = ("http", "https")
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


def _validate(url: str) -> str:
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidURLError(f"Cannot parse URL {url!r}: {exc}") from exc
    if parts.scheme not in _SCHEMES:
        raise InvalidURLError(f"Unsupported scheme in {url!r}")
    host = parts.hostname
    if not host or any(ch.isspace() for ch in parts.netloc):
        raise InvalidURLError(f"Missing or malformed host in {url!r}")
    return url


def normalize_url(raw: str) -> str:
    """Turn a user-supplied seed into an absolute URL without trailing slash.

    ``"example.com/"`` becomes ``"https://example.com"``. Applying the
    function to its own output returns it unchanged.
    """
    url = (raw or "").strip()
    if not url:
        raise InvalidURLError("URL is required")
    if not _SCHEME_PREFIX.match(url):
        url = "https://" + url
    url = url.rstrip("/")
    normalized = _validate(url)
    logger.debug("Normalized URL: %s -> %s", raw, normalized)
    return normalized


def resolve_link(href: str, base_url: str) -> str:
    """Resolve a discovered href against the crawl's base URL.

    Fragments are dropped and the result is normalized the same way as the
    seed, so ``/about/`` and ``/about#team`` both map to ``<base>/about``.
    """
    absolute, _fragment = urldefrag(urljoin(base_url, href.strip()))
    return _validate(absolute.rstrip("/"))


def extract_hostname(url: str) -> str:
    """Return the lower-cased hostname of *url* or ``""``."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def same_origin(candidate: str, base_url: str) -> bool:
    """Hostname equality; scheme and port are ignored."""
    host = extract_hostname(candidate)
    return bool(host) and host == extract_hostname(base_url)


def make_target(seed: str) -> CrawlTarget:
    url = normalize_url(seed)
    parts = urlsplit(url)
    return CrawlTarget(url=url, scheme=parts.scheme, hostname=parts.hostname or "")


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Drop repeated URLs, keeping the first occurrence of each."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
