"""Rule-driven HTML to Markdown conversion built on markdownify."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple
from urllib.parse import unquote

from bs4 import NavigableString, Tag
from markdownify import ATX, ASTERISK, MarkdownConverter, chomp

from .models import ConversionRule, PageOptions

logger = logging.getLogger("web2md")

UNWANTED_TAGS = frozenset(
    ["script", "style", "noscript", "iframe", "nav", "footer", "aside", "header"]
)
PUNCTUATION_ONLY_PATTERN = re.compile(r"^[\s.,;:!?\-]+$")
LIST_START_PATTERN = re.compile(r"^\s*([+-]?\d+)")
CODE_LANGUAGE_PATTERN = re.compile(r"language-(\S+)")
WHITESPACE_RUN_PATTERN = re.compile(r"\s+")

# Proxy hosts that embed the percent-encoded origin URL after their own params.
IMAGE_PROXY_PATTERNS = [
    re.compile(r"substackcdn\.com/image/fetch/[^/]+/+(https?%3A%2F%2F\S+)", re.IGNORECASE),
]
ENCODED_URL_PATTERN = re.compile(r"/(https?%3A%2F%2F[^\s?]+)", re.IGNORECASE)
INVALID_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")

Converter = Callable[[Tag, str, Any], str]


def style_declarations(node: Tag) -> Dict[str, str]:
    """Parse an inline ``style`` attribute into lowercase property/value pairs."""
    declarations: Dict[str, str] = {}
    for declaration in (node.get("style") or "").split(";"):
        prop, sep, value = declaration.partition(":")
        if not sep:
            continue
        value = value.lower().replace("!important", "").strip()
        declarations[prop.strip().lower()] = value
    return declarations


def has_next_sibling(node: Tag) -> bool:
    """Whether a tag or non-blank text follows ``node`` under the same parent."""
    sibling = node.next_sibling
    while sibling is not None:
        if isinstance(sibling, Tag):
            return True
        if type(sibling) is NavigableString and sibling.strip():
            return True
        sibling = sibling.next_sibling
    return False


def list_start(parent: Tag) -> int:
    match = LIST_START_PATTERN.match(parent.get("start") or "")
    return int(match.group(1)) if match else 1


def _decode_payload(src: str, payload: str) -> str:
    if INVALID_ESCAPE_PATTERN.search(payload):
        logger.debug("Keeping image URL %s; payload has a malformed escape", src)
        return src
    try:
        return unquote(payload, errors="strict")
    except UnicodeDecodeError as exc:
        logger.debug("Keeping image URL %s; payload did not decode: %s", src, exc)
        return src


def unwrap_image_url(src: str) -> str:
    """Recover the origin URL from CDN image proxy URLs; otherwise return ``src``."""
    for pattern in IMAGE_PROXY_PATTERNS:
        match = pattern.search(src)
        if match:
            return _decode_payload(src, match.group(1))
    match = ENCODED_URL_PATTERN.search(src)
    if match:
        return _decode_payload(src, match.group(1))
    return src


# Rule predicates


def _is_unwanted(node: Tag, options: Dict[str, Any]) -> bool:
    if node.name in UNWANTED_TAGS:
        return True
    return node.name == "img" and not options.get("include_images")


def _is_hidden(node: Tag, options: Dict[str, Any]) -> bool:
    style = style_declarations(node)
    return style.get("display") == "none" or style.get("visibility") == "hidden"


def _is_empty_link(node: Tag, options: Dict[str, Any]) -> bool:
    return node.name == "a" and not node.get_text().strip()


def _is_bold(node: Tag, options: Dict[str, Any]) -> bool:
    return node.name in ("strong", "b")


def _is_image(node: Tag, options: Dict[str, Any]) -> bool:
    return node.name == "img"


def _is_list_item(node: Tag, options: Dict[str, Any]) -> bool:
    return node.name == "li"


# Rule replacements


def _drop(content: str, node: Tag, options: Dict[str, Any]) -> str:
    return ""


def _convert_strong(content: str, node: Tag, options: Dict[str, Any]) -> str:
    if node.find_parent(["pre", "code"]) is not None:
        return content
    prefix, suffix, text = chomp(content)
    if not text:
        return ""
    # Punctuation-only runs stay unbolded.
    if PUNCTUATION_ONLY_PATTERN.match(text):
        return prefix + text + suffix
    delimiter = 2 * options["strong_em_symbol"]
    return f"{prefix}{delimiter}{text}{delimiter}{suffix}"


def _convert_image(content: str, node: Tag, options: Dict[str, Any]) -> str:
    src = node.get("src") or ""
    if not src or not options.get("include_images"):
        return ""
    alt = node.get("alt") or ""
    src = WHITESPACE_RUN_PATTERN.sub("%20", unwrap_image_url(src))
    return f"![{alt}]({src})"


def _convert_list_item(content: str, node: Tag, options: Dict[str, Any]) -> str:
    content = re.sub(r"^\n+", "", content)
    content = re.sub(r"\n+$", "\n", content)
    # Nested content is indented four spaces.
    content = content.replace("\n", "\n    ")

    prefix = options["bullets"][0] + " "
    parent = node.parent
    if parent is not None and parent.name == "ol":
        index = len(node.find_previous_siblings("li"))
        prefix = f"{list_start(parent) + index}. "

    if has_next_sibling(node) and not content.endswith("\n"):
        content += "\n"
    return prefix + content


DEFAULT_RULES: Tuple[ConversionRule, ...] = (
    ConversionRule("remove_unwanted", _is_unwanted, _drop),
    ConversionRule("remove_hidden", _is_hidden, _drop),
    ConversionRule("remove_empty_links", _is_empty_link, _drop),
    ConversionRule("strong", _is_bold, _convert_strong),
    ConversionRule("images", _is_image, _convert_image),
    ConversionRule("list_item", _is_list_item, _convert_list_item),
)


def build_rules(extra: Iterable[ConversionRule] = ()) -> Tuple[ConversionRule, ...]:
    """Return the default rule table followed by any ``extra`` rules."""
    return DEFAULT_RULES + tuple(extra)


def _code_language(el: Tag) -> Optional[str]:
    code = el.find("code")
    classes = code.get("class", []) if code is not None else []
    for name in classes:
        match = CODE_LANGUAGE_PATTERN.match(name)
        if match:
            return match.group(1)
    return None


class RuleBasedConverter(MarkdownConverter):
    """markdownify converter that consults an ordered rule table first.

    For every element, once its children are converted, the first rule whose
    predicate matches supplies the replacement. Elements no rule claims fall
    through to markdownify's own conversion for that tag.
    """

    class Options(MarkdownConverter.DefaultOptions):
        autolinks = False
        bullets = "-"
        code_language_callback = staticmethod(_code_language)
        heading_style = ATX
        include_images = False
        strong_em_symbol = ASTERISK

    def __init__(self, rules: Optional[Sequence[ConversionRule]] = None, **options: Any) -> None:
        super().__init__(**options)
        self.rules: Tuple[ConversionRule, ...] = tuple(
            rules if rules is not None else build_rules()
        )

    def find_rule(self, node: Tag) -> Optional[ConversionRule]:
        for rule in self.rules:
            if rule.match(node, self.options):
                return rule
        return None

    def get_conv_fn(self, tag_name: str) -> Converter:
        default_fn = super().get_conv_fn(tag_name)

        def convert(el: Tag, text: str, parent_tags: Any = None) -> str:
            rule = self.find_rule(el)
            if rule is not None:
                return rule.apply(text, el, self.options)
            if default_fn is None:
                return text
            return default_fn(el, text, parent_tags=parent_tags)

        return convert


def convert_to_markdown(
    html: str,
    options: Optional[PageOptions] = None,
    rules: Optional[Sequence[ConversionRule]] = None,
) -> str:
    """Convert a cleaned, normalized HTML fragment to Markdown."""
    options = options or PageOptions()
    converter = RuleBasedConverter(rules=rules, include_images=options.include_images)
    return converter.convert(html)
