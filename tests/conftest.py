import datetime as dt

import pytest


def _filler(words: int, word: str = "lorem") -> str:
    return " ".join([word] * words)


def _page_html(body: str, title: str = "Test", head: str = "") -> str:
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title>{head}"
        f"</head><body>{body}</body></html>"
    )


@pytest.fixture
def fixed_now() -> dt.datetime:
    return dt.datetime(2026, 10, 18, 9, 5)


@pytest.fixture
def filler():
    """Build plain text of ``words`` repetitions of a word."""
    return _filler


@pytest.fixture
def page_html():
    """Wrap body markup in a complete HTML document."""
    return _page_html
