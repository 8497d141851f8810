"""Page title, source and <meta> tag extraction."""

from __future__ import annotations

import datetime as dt
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .models import PageMetadata

DEFAULT_TITLE = "Untitled Page"
TIMESTAMP_FORMAT = "%Y-%m-%d at %H:%M"


def get_meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    """Return trimmed content of the first <meta> whose name or property is ``key``."""
    for meta in soup.find_all("meta"):
        if meta.get("name") == key or meta.get("property") == key:
            content = (meta.get("content") or "").strip()
            return content or None
    return None


def document_title(soup: BeautifulSoup) -> str:
    # An inline <svg> in the body can carry its own <title>.
    title_tag = (soup.head or soup).title
    if title_tag is None:
        return DEFAULT_TITLE
    title = " ".join(title_tag.get_text().split())
    return title or DEFAULT_TITLE


def site_hostname(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def _first_meta(soup: BeautifulSoup, *keys: str) -> Optional[str]:
    for key in keys:
        value = get_meta_content(soup, key)
        if value:
            return value
    return None


def extract_metadata(
    soup: BeautifulSoup,
    url: str,
    title: str,
    now: Optional[dt.datetime] = None,
) -> PageMetadata:
    """Collect the metadata header fields for a page."""
    moment = now or dt.datetime.now()
    site_name = _first_meta(soup, "og:site_name", "application-name", "publisher")
    if not site_name:
        hostname = site_hostname(url)
        site_name = hostname[4:] if hostname.startswith("www.") else hostname

    return PageMetadata(
        title=title,
        url=url,
        extracted_at=moment.strftime(TIMESTAMP_FORMAT),
        site_name=site_name,
        author_name=_first_meta(soup, "author", "article:author", "twitter:creator"),
        section=_first_meta(soup, "article:section", "category"),
    )
