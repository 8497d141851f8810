import pytest

from web2md.normalizer import normalize_html


class TestNormalizeHtml:
    """Bold runs are trimmed or unwrapped before conversion."""

    def test_trims_whitespace_inside_bold(self):
        assert normalize_html("<p>Hello <b>  world  </b>.</p>") == "<p>Hello <b>world</b>.</p>"

    def test_trims_only_outer_text_children(self):
        result = normalize_html("<strong> a <em>b</em> c </strong>")
        assert result == "<strong>a <em>b</em> c</strong>"

    @pytest.mark.parametrize("markup", ["<b></b>", "<b>   </b>", "<strong>\n\t</strong>"])
    def test_unwraps_blank_bold(self, markup):
        assert "<b>" not in normalize_html(markup)
        assert "<strong>" not in normalize_html(markup)

    def test_unwrap_keeps_surrounding_text(self):
        assert normalize_html("<p>a<b> </b>b</p>") == "<p>a b</p>"

    @pytest.mark.parametrize(
        "inner",
        [
            "<p>One</p><p>Two</p>",
            "<ul><li>Item</li></ul>",
            "<div>Block</div>",
            "<h2>Heading</h2>",
            "Line<br/>Break",
        ],
    )
    def test_unwraps_bold_around_block_content(self, inner):
        result = normalize_html(f"<strong>{inner}</strong>")
        assert result == inner

    def test_leaves_inline_children_intact(self):
        markup = '<b><a href="/x">link</a></b>'
        assert normalize_html(markup) == markup

    def test_does_not_touch_other_markup(self):
        markup = "<p>plain <em> spaced </em> text</p>"
        assert normalize_html(markup) == markup
