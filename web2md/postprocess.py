"""Metadata header assembly and text-level repair of converted Markdown."""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

from .metadata import DEFAULT_TITLE
from .models import PageMetadata

EMPTY_BOLD_PATTERN = re.compile(r"\*\*\s*\*\*")
QUADRUPLE_ASTERISK_PATTERN = re.compile(r"\*\*\*\*")
LONE_BOLD_MARKER_PATTERN = re.compile(r"^\*\*\s*$", re.MULTILINE)
BOLD_HEADER_AFTER_PUNCTUATION_PATTERN = re.compile(r"([.)\]])\s*(\*\*[A-ZÄÖÜ])")
GLUED_SENTENCE_PATTERN = re.compile(r"\.([A-ZÄÖÜ][a-zäöüß])")
GLUED_UI_TEXT = ("SubscribeSign in", "Sign inSubscribe")
EMPTY_LINK_PATTERN = re.compile(r"(?<!!)\[\s*\]\([^)]*\)")
REPEATED_BREAK_PATTERN = re.compile(r"\n---[ \t]*\n(?:\s*---[ \t]*\n)+")
EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")
TRAILING_SPACE_PATTERN = re.compile(r"[ \t]+$", re.MULTILINE)
MAX_REPAIR_PASSES = 5


def heading_title(title: str) -> str:
    """``title``, or the default when the repair steps would erase it."""
    if postprocess_markdown(title):
        return title
    return DEFAULT_TITLE


def build_header(metadata: PageMetadata) -> str:
    """Title line, metadata lines and the separating thematic break."""
    lines = [
        f"**Source:** {metadata.url}",
        f"**Extracted:** {metadata.extracted_at}",
        f"**Site:** {metadata.site_name}",
    ]
    if metadata.author_name:
        lines.append(f"**Author:** {metadata.author_name}")
    if metadata.section:
        lines.append(f"**Section:** {metadata.section}")
    # Blank lines between entries keep them on separate lines in Notion.
    block = "\n\n".join(lines) + "\n"
    return f"# {heading_title(metadata.title)}\n\n{block}\n---\n\n"


def assemble_document(metadata: PageMetadata, body: str) -> str:
    return build_header(metadata) + body


def collapse_emphasis_artifacts(text: str) -> str:
    # "****" would otherwise be eaten as an empty bold pair.
    text = QUADRUPLE_ASTERISK_PATTERN.sub(" ", text)
    text = EMPTY_BOLD_PATTERN.sub("", text)
    return LONE_BOLD_MARKER_PATTERN.sub("", text)


def break_before_bold_headers(text: str) -> str:
    return BOLD_HEADER_AFTER_PUNCTUATION_PATTERN.sub(r"\1\n\n\2", text)


def break_glued_sentences(text: str) -> str:
    return GLUED_SENTENCE_PATTERN.sub(r".\n\n\1", text)


def remove_glued_ui_text(text: str) -> str:
    for fragment in GLUED_UI_TEXT:
        text = text.replace(fragment, "")
    return text


def remove_empty_links(text: str) -> str:
    return EMPTY_LINK_PATTERN.sub("", text)


def collapse_thematic_breaks(text: str) -> str:
    return REPEATED_BREAK_PATTERN.sub("\n---\n", text)


def tidy_whitespace(text: str) -> str:
    text = EXCESS_NEWLINES_PATTERN.sub("\n\n", text)
    text = TRAILING_SPACE_PATTERN.sub("", text)
    return text.strip()


POSTPROCESS_STEPS: List[Tuple[str, Callable[[str], str]]] = [
    ("collapse_emphasis_artifacts", collapse_emphasis_artifacts),
    ("break_before_bold_headers", break_before_bold_headers),
    ("break_glued_sentences", break_glued_sentences),
    ("remove_glued_ui_text", remove_glued_ui_text),
    ("remove_empty_links", remove_empty_links),
    ("collapse_thematic_breaks", collapse_thematic_breaks),
    ("tidy_whitespace", tidy_whitespace),
]


def _run_steps(text: str) -> str:
    for _, step in POSTPROCESS_STEPS:
        text = step(text)
    return text


def postprocess_markdown(text: str) -> str:
    """Apply the repair steps in order until the text stops changing.

    A late step can expose a match for an earlier one (dropping an empty
    link between ``**`` markers leaves ``****``), so the sequence is
    repeated, at most ``MAX_REPAIR_PASSES`` times.
    """
    for _ in range(MAX_REPAIR_PASSES):
        repaired = _run_steps(text)
        if repaired == text:
            break
        text = repaired
    return text
