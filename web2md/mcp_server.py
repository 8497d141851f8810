"""MCP server exposing the web2md conversion tool."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import CrawlConfig
from .crawler import run_crawler
from .models import ExtractionFailure

logger = logging.getLogger("web2md.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="web2md")


async def _convert_once(url: str, config: CrawlConfig) -> str:
    results = await run_crawler([url], config, save=False)
    if not results:
        raise RuntimeError(f"Failed to load {url}")
    result = results[0].result
    if isinstance(result, ExtractionFailure):
        raise RuntimeError(result.message)
    return result.markdown


@mcp.tool()
async def convert(url: str, include_images: bool = False) -> str:
    """Render a web page with Playwright and return it as clean Markdown."""

    config = CrawlConfig(
        output_root=Path(tempfile.gettempdir()),
        wait_after_load=1.0,
        navigation_timeout=30.0,
        include_images=include_images,
    )
    return await _convert_once(url, config)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
