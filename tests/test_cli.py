import pytest

from web2md import cli, crawler
from web2md.models import Page

ARTICLE = (
    "<html><head><title>My Page: Draft</title></head>"
    "<body><article><p>Hello <b>world</b>.</p></article></body></html>"
)


@pytest.fixture
def saved_page(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(ARTICLE, encoding="utf-8")
    return path


class TestParseArgs:
    def test_bare_urls_default_to_convert(self):
        args = cli.parse_args(["https://example.com/a", "https://example.com/b"])
        assert args.command == "convert"
        assert args.urls == ["https://example.com/a", "https://example.com/b"]
        assert not args.images
        assert not args.no_render
        assert args.wait == 1.0
        assert args.timeout == 30.0

    def test_file_requires_url(self, saved_page):
        with pytest.raises(SystemExit):
            cli.parse_args(["file", str(saved_page)])

    def test_file_arguments(self, saved_page):
        args = cli.parse_args(["file", str(saved_page), "--url", "https://example.com/a", "--images"])
        assert args.command == "file"
        assert args.path == saved_page
        assert args.images


class TestFileCommand:
    def test_writes_markdown_file(self, tmp_path, saved_page):
        out = tmp_path / "out"
        code = cli.main(
            ["file", str(saved_page), "--url", "https://example.com/a", "--output", str(out)]
        )
        assert code == 0
        markdown = (out / "My-Page-Draft.md").read_text(encoding="utf-8")
        assert markdown.startswith("# My Page: Draft\n\n**Source:** https://example.com/a")
        assert markdown.endswith("Hello **world**.")

    def test_stdout_skips_saving(self, tmp_path, saved_page, capsys):
        out = tmp_path / "out"
        code = cli.main(
            ["file", str(saved_page), "--url", "https://example.com/a", "--output", str(out), "--stdout"]
        )
        assert code == 0
        assert capsys.readouterr().out.startswith("# My Page: Draft\n")
        assert not out.exists()

    def test_missing_file_fails(self, tmp_path):
        code = cli.main(["file", str(tmp_path / "nope.html"), "--url", "https://example.com/a"])
        assert code == 1


class TestConvertCommand:
    def test_no_render_fetches_over_http(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setattr(
            crawler, "fetch_page", lambda url, config, session=None: Page(html=ARTICLE, url=url)
        )
        code = cli.main(["https://example.com/a", "--no-render", "--stdout", "--output", str(tmp_path)])
        assert code == 0
        assert "Hello **world**." in capsys.readouterr().out

    def test_partial_failure_returns_nonzero(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            crawler, "fetch_page", lambda url, config, session=None: Page(html=ARTICLE, url=url)
        )
        code = cli.main(
            ["https://example.com/a", "about:blank", "--no-render", "--output", str(tmp_path)]
        )
        assert code == 1
        assert (tmp_path / "My-Page-Draft.md").exists()
