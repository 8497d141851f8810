"""Removal of known UI fragments from extracted content."""

from __future__ import annotations

import logging
from typing import Iterable

from .config import GENERIC_REMOVAL_SELECTORS, SITE_REMOVAL_SELECTORS
from .locator import SELECTOR_ERRORS, matching_site_selectors
from .models import ContentNode

logger = logging.getLogger("web2md")


def remove_matching(node: ContentNode, selectors: Iterable[str]) -> int:
    """Decompose every element matching ``selectors``; return how many went."""
    removed = 0
    for selector in selectors:
        try:
            matches = node.soup.select(selector)
        except SELECTOR_ERRORS as exc:
            logger.debug("Skipping removal selector %r: %s", selector, exc)
            continue
        for element in matches:
            # An earlier match may already have taken this one with it.
            if element.decomposed:
                continue
            element.decompose()
            removed += 1
    return removed


def clean_content(node: ContentNode, hostname: str) -> ContentNode:
    """Strip site-specific cruft and navigation landmarks in place.

    Site removals apply only when the hostname contains the site key; the
    generic list covers navigation landmarks only.
    """
    site_selectors = list(matching_site_selectors(hostname, SITE_REMOVAL_SELECTORS))
    removed = remove_matching(node, site_selectors)
    removed += remove_matching(node, GENERIC_REMOVAL_SELECTORS)
    if removed:
        logger.debug("Removed %d non-content element(s)", removed)
    return node
