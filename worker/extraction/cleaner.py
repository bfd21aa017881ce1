"""HTML noise removal and main-content location."""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup, Comment, NavigableString, PageElement, Tag

# Tags to completely remove (including content)
REMOVE_TAGS = frozenset(
    [
        "script",
        "style",
        "noscript",
        "iframe",
        "object",
        "embed",
        "svg",
        "canvas",
        "template",
        "dialog",
    ]
)

# Regions that are page chrome rather than content
NOISE_SELECTORS = [
    "nav",
    "header",
    "footer",
    "aside",
    ".sidebar",
    "#sidebar",
    ".comments",
    "#comments",
    ".ad",
    ".advertisement",
    ".social-share",
    ".navigation",
    ".menu",
]

# Ordered candidates for the main content block; the first one with enough text wins
CONTENT_LOCATORS = [
    "article",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".article-body",
    ".post-body",
    ".content-area",
    ".blog-post",
    "main",
    "[role=main]",
    "#content",
    ".site-content",
    ".main-content",
    ".page-content",
    ".story-content",
    "#main",
    ".post",
    ".hentry",
    ".content",
    ".article",
    "body",
]

HEADING_TAGS = frozenset(["h1", "h2", "h3", "h4", "h5", "h6"])

CONTAINER_TAGS = frozenset(
    [
        "div",
        "section",
        "article",
        "main",
        "blockquote",
        "figure",
        "figcaption",
        "form",
        "details",
        "summary",
        "dl",
        "dd",
        "dt",
        "pre",
        "center",
        "body",
        "html",
    ]
)

MIN_CONTENT_CHARS = 100


@dataclass
class LocatedContent:
    """The main content block of a page."""

    locator: str
    text: str  # markdown-like text with paragraphs, headings, lists and tables
    plain_length: int


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim the ends."""
    return re.sub(r"\s+", " ", text).strip()


def strip_noise(soup: BeautifulSoup) -> int:
    """
    Remove scripts, styles, comments and page chrome in place.

    Returns:
        Number of elements removed
    """
    removed = 0

    for tag in soup.find_all(list(REMOVE_TAGS)):
        tag.decompose()
        removed += 1

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
        removed += 1

    for selector in NOISE_SELECTORS:
        for tag in soup.select(selector):
            if tag.decomposed:
                continue
            tag.decompose()
            removed += 1

    return removed


def _inline_text(tag: Tag) -> str:
    """
    Flatten a tag's text, keeping bold emphasis markers.

    Walks with an explicit stack so arbitrarily deep markup cannot exhaust
    the interpreter's recursion limit.
    """
    # (element, remaining children, text parts collected for the element)
    stack: list[tuple[Tag, Iterator[PageElement], list[str]]] = [(tag, iter(tag.children), [])]
    while True:
        current, children, parts = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            text = normalize_whitespace("".join(parts))
            if not stack:
                return text
            parent_parts = stack[-1][2]
            if current.name in ("strong", "b") and text:
                parent_parts.append(f" **{text}** ")
            else:
                parent_parts.append(text)
            continue

        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag) and child.name not in REMOVE_TAGS:
            if child.name == "br":
                parts.append(" ")
            else:
                stack.append((child, iter(child.children), []))


def _render_list(list_tag: Tag) -> str:
    ordered = list_tag.name == "ol"
    lines = []
    for position, item in enumerate(list_tag.find_all("li", recursive=False), start=1):
        text = _inline_text(item)
        if text:
            lines.append(f"{position}. {text}" if ordered else f"- {text}")
    return "\n".join(lines)


def _render_table(table: Tag) -> str:
    lines = []
    for index, row in enumerate(table.find_all("tr")):
        cells = [_inline_text(cell) for cell in row.find_all(["th", "td"])]
        if not cells:
            continue
        lines.append("| " + " | ".join(cells) + " |")
        if index == 0:
            lines.append("| " + " | ".join("---" for _ in cells) + " |")
    return "\n".join(lines)


def _collect_blocks(tag: Tag, blocks: list[str]) -> None:
    buffer: list[str] = []

    def flush() -> None:
        text = normalize_whitespace(" ".join(buffer))
        buffer.clear()
        if text:
            blocks.append(text)

    # One iterator per open container; leaving a container ends its last block
    stack: list[Iterator[PageElement]] = [iter(tag.children)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            flush()
            continue

        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            buffer.append(str(child))
            continue
        if not isinstance(child, Tag) or child.name in REMOVE_TAGS:
            continue

        name = child.name
        if name in HEADING_TAGS:
            flush()
            text = _inline_text(child)
            if text:
                blocks.append("#" * int(name[1]) + " " + text)
        elif name in ("ul", "ol"):
            flush()
            rendered = _render_list(child)
            if rendered:
                blocks.append(rendered)
        elif name == "table":
            flush()
            rendered = _render_table(child)
            if rendered:
                blocks.append(rendered)
        elif name == "p":
            flush()
            text = _inline_text(child)
            if text:
                blocks.append(text)
        elif name in CONTAINER_TAGS:
            flush()
            stack.append(iter(child.children))
        else:
            buffer.append(_inline_text(child))


def html_to_text(tag: Tag) -> str:
    """
    Render a content block as markdown-like text.

    Paragraphs are separated by blank lines, headings get ``#`` prefixes,
    lists become ``-``/``1.`` lines and tables become pipe rows, so the
    scorer sees the same structure a markdown rewrite would have.
    """
    blocks: list[str] = []
    _collect_blocks(tag, blocks)
    return "\n\n".join(blocks)


def locate_main_content(
    soup: BeautifulSoup,
    min_length: int = MIN_CONTENT_CHARS,
) -> LocatedContent | None:
    """
    Find the first content-region candidate with enough text.

    Args:
        soup: Document that has already had its noise stripped
        min_length: Minimum plain-text length for a candidate to qualify

    Returns:
        LocatedContent, or None when no candidate qualifies
    """
    for locator in CONTENT_LOCATORS:
        element = soup.select_one(locator)
        if element is None:
            continue
        plain = element.get_text(" ", strip=True)
        if len(plain) >= min_length:
            return LocatedContent(
                locator=locator,
                text=html_to_text(element),
                plain_length=len(plain),
            )
    return None
