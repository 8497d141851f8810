"""Orchestration of the extraction stages into a single tagged result."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from bs4 import BeautifulSoup

from .cleaner import clean_content
from .config import ExtractionConfig
from .converter import convert_to_markdown
from .locator import locate_main_content
from .metadata import document_title, extract_metadata, site_hostname
from .models import (
    ExtractionFailure,
    ExtractionSuccess,
    Page,
    PageOptions,
    PipelineResult,
)
from .normalizer import normalize_html
from .postprocess import assemble_document, postprocess_markdown

logger = logging.getLogger("web2md")

UNKNOWN_ERROR_MESSAGE = "Unknown error during extraction"


def _run_stages(
    page: Page,
    options: PageOptions,
    config: ExtractionConfig,
    now: Optional[dt.datetime],
) -> ExtractionSuccess:
    soup = BeautifulSoup(page.html, "html.parser")
    hostname = site_hostname(page.url)
    title = document_title(soup)

    content = locate_main_content(soup, hostname, config)
    content = clean_content(content, hostname)
    html = normalize_html(content.inner_html())

    metadata = extract_metadata(soup, page.url, title, now=now)
    body = convert_to_markdown(html, options)
    markdown = postprocess_markdown(assemble_document(metadata, body))
    logger.debug("Converted %s to %d characters of Markdown", page.url, len(markdown))
    return ExtractionSuccess(markdown=markdown, title=metadata.title, url=metadata.url)


def extract_markdown(
    page: Page,
    options: Optional[PageOptions] = None,
    config: Optional[ExtractionConfig] = None,
    now: Optional[dt.datetime] = None,
) -> PipelineResult:
    """Run the whole pipeline for ``page``; never raises.

    Any failure in a stage aborts the run and is reported as an
    ``ExtractionFailure``. No partial Markdown is returned.
    """
    try:
        return _run_stages(page, options or PageOptions(), config or ExtractionConfig(), now)
    except Exception as exc:  # noqa: BLE001 - every stage failure becomes a result
        logger.exception("Extraction failed for %s", getattr(page, "url", page))
        return ExtractionFailure(message=str(exc) or UNKNOWN_ERROR_MESSAGE)
