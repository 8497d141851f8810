"""Repair of bold markup that would produce broken Markdown."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag

BOLD_TAGS = ["strong", "b"]
BLOCK_TAGS = ["p", "div", "ul", "ol", "li", "br", "h1", "h2", "h3", "h4", "h5", "h6"]


def _is_text(node) -> bool:
    # Comments and other NavigableString subclasses are not text.
    return type(node) is NavigableString


def _strip_edges(element: Tag) -> None:
    first = element.contents[0] if element.contents else None
    if _is_text(first):
        first.replace_with(first.lstrip())
    last = element.contents[-1] if element.contents else None
    if _is_text(last):
        last.replace_with(last.rstrip())


def normalize_bold(element: Tag) -> None:
    """Unwrap or trim a single strong/b element in place."""
    if not element.get_text().strip():
        element.unwrap()
        return
    if element.find(BLOCK_TAGS) is not None:
        element.unwrap()
        return
    _strip_edges(element)
    if not element.get_text().strip():
        element.unwrap()


def normalize_html(markup: str) -> str:
    """Return ``markup`` with bold runs that never span blocks or edge whitespace."""
    soup = BeautifulSoup(markup, "html.parser")
    for element in soup.find_all(BOLD_TAGS):
        normalize_bold(element)
    return soup.decode()
