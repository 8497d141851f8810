"""High-level orchestration for acquiring pages and saving their Markdown."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests
from playwright.async_api import (
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CrawlConfig
from .models import ExtractionSuccess, Page, PageOptions, PipelineResult
from .pipeline import extract_markdown
from .utils import RestrictedUrlError, is_restricted_url, sanitize_filename

logger = logging.getLogger("web2md")


@dataclass
class ProcessResult:
    """Outcome and timing details for a processed URL."""

    url: str
    result: PipelineResult
    output_path: Optional[Path]
    total_seconds: float

    @property
    def markdown(self) -> str:
        if isinstance(self.result, ExtractionSuccess):
            return self.result.markdown
        return ""


def ensure_allowed(url: str) -> None:
    if is_restricted_url(url):
        raise RestrictedUrlError(
            f"Cannot access {url or 'this page'}: browser system pages, "
            "extension stores and local files are restricted."
        )


async def render_page(
    playwright: Playwright,
    url: str,
    config: CrawlConfig,
) -> Page:
    """Navigate to a URL using Playwright and return its rendered HTML."""
    browser = await playwright.chromium.launch(headless=True)
    page = await browser.new_page(user_agent=config.user_agent)
    page.set_default_navigation_timeout(config.navigation_timeout * 1000)
    try:
        logger.info("Loading %s", url)
        await page.goto(url, wait_until="networkidle")
        if config.wait_after_load:
            await page.wait_for_timeout(int(config.wait_after_load * 1000))
        html = await page.content()
        final_url = page.url
    finally:
        await browser.close()
    return Page(html=html, url=final_url)


def fetch_page(
    url: str,
    config: CrawlConfig,
    session: Optional[requests.Session] = None,
) -> Page:
    """Download raw HTML without rendering scripts."""
    session = session or requests.Session()
    logger.info("Fetching %s", url)
    resp = session.get(
        url,
        headers={"User-Agent": config.user_agent},
        timeout=config.navigation_timeout,
    )
    resp.raise_for_status()
    return Page(html=resp.text, url=resp.url)


def save_markdown(result: ExtractionSuccess, output_root: Path) -> Path:
    """Write Markdown to ``output_root`` using a filename derived from the title."""
    output_root.mkdir(parents=True, exist_ok=True)
    output_path = output_root / sanitize_filename(result.title)
    output_path.write_text(result.markdown, encoding="utf-8")
    logger.info("Saved Markdown to %s", output_path)
    return output_path


def process_page(
    page: Page,
    config: CrawlConfig,
    start_time: float,
    save: bool = True,
) -> ProcessResult:
    """Run the extraction pipeline on an acquired page and persist the output."""
    result = extract_markdown(page, PageOptions(include_images=config.include_images))
    output_path = None
    if isinstance(result, ExtractionSuccess):
        if save:
            output_path = save_markdown(result, config.output_root)
    else:
        logger.error("Failed to convert %s: %s", page.url, result.message)
    return ProcessResult(
        url=page.url,
        result=result,
        output_path=output_path,
        total_seconds=time.perf_counter() - start_time,
    )


async def _acquire(
    playwright: Optional[Playwright],
    url: str,
    config: CrawlConfig,
    session: Optional[requests.Session],
) -> Optional[Page]:
    try:
        ensure_allowed(url)
        if playwright is not None:
            return await render_page(playwright, url, config)
        return await asyncio.to_thread(fetch_page, url, config, session)
    except RestrictedUrlError as exc:
        logger.error("%s", exc)
    except PlaywrightTimeoutError as exc:
        logger.error("Timeout while loading %s: %s", url, exc)
    except requests.RequestException as exc:
        logger.error("Failed to fetch %s: %s", url, exc)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error loading %s", url)
    return None


async def _crawl(
    urls: List[str],
    config: CrawlConfig,
    playwright: Optional[Playwright],
    save: bool,
) -> List[ProcessResult]:
    results: List[ProcessResult] = []
    session = None if playwright is not None else requests.Session()
    for url in urls:
        start = time.perf_counter()
        page = await _acquire(playwright, url, config, session)
        if page is None:
            continue
        results.append(process_page(page, config, start, save=save))
    return results


async def run_crawler(
    urls: List[str],
    config: CrawlConfig,
    save: bool = True,
) -> List[ProcessResult]:
    """Acquire each URL sequentially and convert it to Markdown."""
    if not config.render:
        return await _crawl(urls, config, None, save)
    async with async_playwright() as playwright:
        return await _crawl(urls, config, playwright, save)
