"""Configuration objects, constants, and selector tables for extraction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

MIN_CANDIDATE_TEXT_CHARS = 100
MIN_CONTENT_RATIO = 0.3
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 web2md"
)

# Trusted per-site content containers, most specific first.
SITE_CONTENT_SELECTORS: Dict[str, List[str]] = {
    "substack.com": [
        ".body.markup",
        ".post-content",
        "article .body",
        "article",
    ],
    "medium.com": [
        "article section",
        "article",
    ],
}

# Semantic landmarks first, then class/id heuristics.
GENERIC_CONTENT_SELECTORS: List[str] = [
    "article",
    '[role="main"]',
    "main",
    ".post-content",
    ".article-content",
    ".entry-content",
    ".content",
    "#content",
    '[role="article"]',
    ".feed-shared-update-v2",
    ".scaffold-layout__main",
]

SITE_REMOVAL_SELECTORS: Dict[str, List[str]] = {
    "substack.com": [
        ".subscribe-widget",
        ".subscription-widget",
        ".subscribe-prompt",
        ".post-ufi",
        ".like-button-container",
        ".share-dialog",
        ".restack-button",
        ".frontend-components-notification",
        ".paywall",
        ".guest-post-subscribe-section",
        ".recommendations",
        ".recommendations-container",
    ],
    "medium.com": [
        '[data-testid="audioPlayButton"]',
        '[data-testid="headerSocialShareButton"]',
    ],
}

GENERIC_REMOVAL_SELECTORS: List[str] = [
    "nav",
    '[role="navigation"]',
]


@dataclass(frozen=True)
class ExtractionConfig:
    """Thresholds used when judging main content candidates."""

    min_candidate_chars: int = MIN_CANDIDATE_TEXT_CHARS
    min_content_ratio: float = MIN_CONTENT_RATIO


@dataclass
class CrawlConfig:
    """Top-level settings that control page acquisition and output."""

    output_root: Path
    wait_after_load: float = 1.0
    navigation_timeout: float = 30.0
    render: bool = True
    include_images: bool = False
    user_agent: str = DEFAULT_USER_AGENT
