"""Convert rendered web pages into clean Markdown with a metadata header."""

from .models import (
    ExtractionFailure,
    ExtractionSuccess,
    Page,
    PageOptions,
    PipelineResult,
)
from .pipeline import extract_markdown

__all__ = [
    "ExtractionFailure",
    "ExtractionSuccess",
    "Page",
    "PageOptions",
    "PipelineResult",
    "extract_markdown",
]
