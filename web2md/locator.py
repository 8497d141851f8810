"""Selection of the subtree that holds a page's main content."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .config import (
    GENERIC_CONTENT_SELECTORS,
    SITE_CONTENT_SELECTORS,
    ExtractionConfig,
)
from .models import ContentNode

logger = logging.getLogger("web2md")

# Raised by soupsieve for malformed or unsupported selectors.
SELECTOR_ERRORS = (SelectorSyntaxError, NotImplementedError, ValueError)


def text_length(element: Tag) -> int:
    """Length of the element's text with surrounding whitespace removed."""
    return len(element.get_text().strip())


def clone_element(element: Tag) -> ContentNode:
    """Copy an element into a standalone document."""
    if isinstance(element, BeautifulSoup):
        # Bodiless document: wrap its top-level content so the clone has one root.
        clone = BeautifulSoup(f"<body>{element.decode_contents()}</body>", "html.parser")
        for tag in clone.find_all(["head", "title"]):
            tag.decompose()
        return ContentNode(clone)
    return ContentNode(BeautifulSoup(str(element), "html.parser"))


def _select_first(soup: BeautifulSoup, selector: str) -> Optional[Tag]:
    try:
        return soup.select_one(selector)
    except SELECTOR_ERRORS as exc:
        logger.debug("Skipping content selector %r: %s", selector, exc)
        return None


def matching_site_selectors(
    hostname: str,
    table: Dict[str, List[str]],
) -> Iterable[str]:
    """Yield selectors of every site key contained in ``hostname``."""
    for site, selectors in table.items():
        if site in hostname:
            yield from selectors


def locate_main_content(
    soup: BeautifulSoup,
    hostname: str,
    config: Optional[ExtractionConfig] = None,
) -> ContentNode:
    """Return a detached copy of the best article candidate, or of the body."""
    config = config or ExtractionConfig()

    for selector in matching_site_selectors(hostname, SITE_CONTENT_SELECTORS):
        element = _select_first(soup, selector)
        if element is not None and text_length(element) > config.min_candidate_chars:
            logger.debug("Using site-specific content selector %s", selector)
            return clone_element(element)

    body = soup.body or soup
    body_text_length = text_length(body)
    min_length = body_text_length * config.min_content_ratio

    for selector in GENERIC_CONTENT_SELECTORS:
        element = _select_first(soup, selector)
        if element is None:
            continue
        length = text_length(element)
        if length <= config.min_candidate_chars:
            continue
        if length >= min_length:
            logger.debug(
                "Using content selector %s (%d of %d characters)",
                selector,
                length,
                body_text_length,
            )
            return clone_element(element)
        logger.debug(
            "Content selector %s holds %d of %d characters; continuing",
            selector,
            length,
            body_text_length,
        )

    logger.debug("No content candidate qualified; falling back to the page body")
    return clone_element(body)
