import logging

import pytest

from web2md import pipeline
from web2md.models import ExtractionFailure, ExtractionSuccess, Page, PageOptions
from web2md.pipeline import UNKNOWN_ERROR_MESSAGE, extract_markdown


class TestExtractMarkdown:
    """End-to-end runs over small in-memory pages."""

    def test_bold_run_is_trimmed_under_standard_header(self, page_html, fixed_now):
        page = Page(
            html=page_html("<article><h1>Test</h1><p>Hello <b>  world  </b>.</p></article>"),
            url="https://www.example.com/post",
        )
        result = extract_markdown(page, PageOptions(include_images=False), now=fixed_now)
        assert isinstance(result, ExtractionSuccess)
        assert result.title == "Test"
        assert result.url == "https://www.example.com/post"
        assert result.markdown == (
            "# Test\n\n"
            "**Source:** https://www.example.com/post\n\n"
            "**Extracted:** 2026-10-18 at 09:05\n\n"
            "**Site:** example.com\n\n"
            "---\n\n"
            "# Test\n\n"
            "Hello **world**."
        )

    def test_scripts_and_hidden_blocks_never_appear(self, page_html, filler):
        body = (
            "<article><h1>Heading</h1>"
            "<script>alert('tracking')</script>"
            '<div style="display:none">Secret</div>'
            f"<p>Kept paragraph {filler(40)}</p></article>"
        )
        result = extract_markdown(Page(html=page_html(body), url="https://example.com/a"))
        assert result.success
        assert "Kept paragraph" in result.markdown
        assert "Secret" not in result.markdown
        assert "alert" not in result.markdown
        assert "tracking" not in result.markdown

    def test_optional_metadata_lines(self, page_html, filler, fixed_now):
        head = (
            '<meta name="author" content="Ada">'
            '<meta property="article:section" content="Science">'
            '<meta property="og:site_name" content="The Daily">'
        )
        page = Page(
            html=page_html(f"<article><p>{filler(40)}</p></article>", title="Story", head=head),
            url="https://news.example.org/story",
        )
        markdown = extract_markdown(page, now=fixed_now).markdown
        assert markdown.startswith(
            "# Story\n\n"
            "**Source:** https://news.example.org/story\n\n"
            "**Extracted:** 2026-10-18 at 09:05\n\n"
            "**Site:** The Daily\n\n"
            "**Author:** Ada\n\n"
            "**Section:** Science\n\n"
            "---\n\n"
        )

    def test_images_follow_page_options(self, page_html, filler):
        body = f'<article><p>{filler(40)}</p><p><img src="https://x.example/a.png" alt="pic"></p></article>'
        page = Page(html=page_html(body), url="https://example.com/a")
        with_images = extract_markdown(page, PageOptions(include_images=True))
        without_images = extract_markdown(page)
        assert "![pic](https://x.example/a.png)" in with_images.markdown
        assert "![" not in without_images.markdown

    def test_image_without_alt_survives_postprocessing(self):
        page = Page(
            html='<body><p>Intro</p><p><img src="https://x.example/a.png"></p></body>',
            url="https://example.com/a",
        )
        result = extract_markdown(page, PageOptions(include_images=True))
        assert result.markdown.endswith("Intro\n\n![](https://x.example/a.png)")

    @pytest.mark.parametrize(
        "html",
        [
            "",
            "<html><body></body></html>",
            "<p>just text</p>",
            "<div><span>unclosed",
            "<title>****</title>",
            "<title>** **</title><p>body</p>",
        ],
    )
    def test_success_always_starts_with_heading(self, html):
        result = extract_markdown(Page(html=html, url="https://example.com/"))
        assert isinstance(result, ExtractionSuccess)
        assert result.markdown.startswith("# ")

    def test_empty_page_uses_default_title(self):
        result = extract_markdown(Page(html="", url="https://example.com/"))
        assert result.title == "Untitled Page"
        assert result.markdown.endswith("**Site:** example.com\n\n---")


class TestFailures:
    def test_stage_error_becomes_failure(self, monkeypatch, page_html, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline, "convert_to_markdown", boom)
        with caplog.at_level(logging.ERROR, logger="web2md"):
            result = extract_markdown(Page(html=page_html("<p>x</p>"), url="https://example.com/"))
        assert isinstance(result, ExtractionFailure)
        assert result.message == "boom"
        assert not result.success
        assert "Extraction failed for https://example.com/" in caplog.text

    def test_error_without_message_gets_default(self, monkeypatch, page_html):
        def silent(*args, **kwargs):
            raise RuntimeError()

        monkeypatch.setattr(pipeline, "postprocess_markdown", silent)
        result = extract_markdown(Page(html=page_html("<p>x</p>"), url="https://example.com/"))
        assert result == ExtractionFailure(message=UNKNOWN_ERROR_MESSAGE)
