"""Data models used throughout the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class PageOptions:
    """Caller-supplied switches for a single pipeline invocation."""

    include_images: bool = False


@dataclass(frozen=True)
class Page:
    """Rendered HTML of a page together with the URL it was served from."""

    html: str
    url: str


@dataclass(frozen=True)
class PageMetadata:
    """Metadata describing the extracted page."""

    title: str
    url: str
    extracted_at: str
    site_name: str
    author_name: Optional[str] = None
    section: Optional[str] = None


@dataclass
class ContentNode:
    """Detached copy of the subtree chosen as the page's main content.

    ``soup`` is a standalone document parsed from the chosen element, so
    mutating it never touches the page it was taken from.
    """

    soup: BeautifulSoup

    @property
    def root(self) -> Optional[Tag]:
        return self.soup.find(True)

    def inner_html(self) -> str:
        root = self.root
        if root is None:
            return ""
        return root.decode_contents()


@dataclass(frozen=True)
class ConversionRule:
    """A named (predicate, replacement) pair applied during conversion."""

    name: str
    match: Callable[[Tag, Dict[str, Any]], bool]
    apply: Callable[[str, Tag, Dict[str, Any]], str]


@dataclass(frozen=True)
class ExtractionSuccess:
    """Markdown produced for a page."""

    markdown: str
    title: str
    url: str
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ExtractionFailure:
    """Reason a page could not be converted."""

    message: str
    success: bool = field(default=False, init=False)


PipelineResult = Union[ExtractionSuccess, ExtractionFailure]
