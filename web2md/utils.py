"""Utility helpers for URL screening and filename handling."""

from __future__ import annotations

import re
from typing import Optional

INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
WHITESPACE_PATTERN = re.compile(r"\s+")
HYPHEN_RUN_PATTERN = re.compile(r"-+")
MAX_FILENAME_STEM = 100

# Pages a browser refuses to hand to extensions; they are refused here too.
RESTRICTED_URL_PATTERNS = [
    re.compile(r"^chrome://"),
    re.compile(r"^chrome-extension://"),
    re.compile(r"^edge://"),
    re.compile(r"^about:"),
    re.compile(r"^view-source:"),
    re.compile(r"^file://"),
    re.compile(r"^https://chrome\.google\.com/webstore"),
    re.compile(r"^https://microsoftedge\.microsoft\.com/addons"),
]


class RestrictedUrlError(ValueError):
    """Raised for URLs whose content may not be captured."""


def is_restricted_url(url: Optional[str]) -> bool:
    if not url:
        return True
    return any(pattern.match(url) for pattern in RESTRICTED_URL_PATTERNS)


def sanitize_filename(title: Optional[str], suffix: str = ".md") -> str:
    """Generate a download-safe filename from a page title."""
    stem = INVALID_FILENAME_CHARS.sub("-", title or "content")
    stem = WHITESPACE_PATTERN.sub("-", stem)
    stem = HYPHEN_RUN_PATTERN.sub("-", stem)
    stem = stem.strip("-")[:MAX_FILENAME_STEM] or "content"
    return f"{stem}{suffix}"
