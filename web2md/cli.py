"""Command-line entry point for web2md."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Sequence

from .config import CrawlConfig
from .crawler import ProcessResult, process_page, run_crawler
from .models import Page

logger = logging.getLogger("web2md.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("convert", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where Markdown files should be written",
    )
    parser.add_argument(
        "--images",
        action="store_true",
        help="Keep images as Markdown image links",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Write Markdown to STDOUT instead of saving files",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("urls", nargs="+", help="One or more URLs to capture")
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading HTML",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Fetch raw HTML over HTTP instead of rendering in a browser",
    )
    _add_common_arguments(parser)


def _add_file_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", type=Path, help="Saved HTML file to convert")
    parser.add_argument(
        "--url",
        required=True,
        help="Address the HTML was saved from; used for the Source and Site lines",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert web pages to clean Markdown with a metadata header.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert", help="Render web pages and convert them to Markdown"
    )
    _add_convert_arguments(convert_parser)

    file_parser = subparsers.add_parser(
        "file", help="Convert a saved HTML file to Markdown"
    )
    _add_file_arguments(file_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.stdout and not args.verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _emit(results: List[ProcessResult]) -> None:
    for idx, processed in enumerate(results):
        markdown = processed.markdown
        if not markdown:
            continue
        if idx:
            sys.stdout.write("\n")
        sys.stdout.write(markdown + "\n")
    sys.stdout.flush()


def _run_convert(args: argparse.Namespace) -> List[ProcessResult]:
    config = CrawlConfig(
        output_root=Path(args.output).resolve(),
        wait_after_load=args.wait,
        navigation_timeout=args.timeout,
        render=not args.no_render,
        include_images=args.images,
    )
    return asyncio.run(run_crawler(args.urls, config, save=not args.stdout))


def _run_file(args: argparse.Namespace) -> List[ProcessResult]:
    config = CrawlConfig(
        output_root=Path(args.output).resolve(),
        include_images=args.images,
    )
    start = time.perf_counter()
    try:
        html = args.path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.path, exc)
        return []
    page = Page(html=html, url=args.url)
    return [process_page(page, config, start, save=not args.stdout)]


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)

    overall_start = time.perf_counter()
    if args.command == "convert":
        results = _run_convert(args)
        total_inputs = len(args.urls)
    else:
        results = _run_file(args)
        total_inputs = 1
    total_elapsed = time.perf_counter() - overall_start

    successes = sum(1 for processed in results if processed.result.success)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        successes,
        total_inputs,
        total_inputs - successes,
    )
    if args.verbose:
        for processed in results:
            logger.debug("Timing for %s -> total: %.2fs", processed.url, processed.total_seconds)

    if args.stdout:
        _emit(results)
    return 0 if successes == total_inputs else 1


if __name__ == "__main__":
    sys.exit(main())
