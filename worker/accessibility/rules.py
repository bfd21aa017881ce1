"""WCAG rule checks over a parsed HTML document.

Each rule is an independent function taking the document and returning
either None (the rule passes) or a single AccessibilityViolation that
groups every failing node. Rules never mutate the document.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from bs4 import BeautifulSoup, Tag

HELP_URL_BASE = "https://dequeuniversity.com/rules/axe/4.4"
SNIPPET_LENGTH = 200

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6"

# input types that never need a visible label
UNLABELED_INPUT_TYPES = frozenset(["hidden", "submit", "button", "reset", "image"])


class Impact(StrEnum):
    """Severity of an accessibility violation."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


@dataclass
class ViolationNode:
    """A single element failing a rule."""

    locator: str  # e.g. "img:nth-of-type(2)"
    failure_reason: str
    html: str

    def to_dict(self) -> dict:
        return {
            "locator": self.locator,
            "failure_reason": self.failure_reason,
            "html": self.html,
        }


@dataclass
class AccessibilityViolation:
    """All failing nodes for one rule."""

    rule_id: str
    impact: Impact
    description: str
    help: str
    help_url: str
    wcag_tags: list[str] = field(default_factory=list)
    nodes: list[ViolationNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "impact": self.impact.value,
            "description": self.description,
            "help": self.help,
            "help_url": self.help_url,
            "wcag_tags": self.wcag_tags,
            "nodes": [n.to_dict() for n in self.nodes],
        }


@dataclass(frozen=True)
class Rule:
    """Static metadata for a rule plus its check function."""

    rule_id: str
    impact: Impact
    description: str
    help: str
    wcag_tags: tuple[str, ...]
    check: Callable[[BeautifulSoup], list[ViolationNode]]

    @property
    def help_url(self) -> str:
        return f"{HELP_URL_BASE}/{self.rule_id}"

    def run(self, soup: BeautifulSoup) -> AccessibilityViolation | None:
        nodes = self.check(soup)
        if not nodes:
            return None
        return AccessibilityViolation(
            rule_id=self.rule_id,
            impact=self.impact,
            description=self.description,
            help=self.help,
            help_url=self.help_url,
            wcag_tags=list(self.wcag_tags),
            nodes=nodes,
        )


def _snippet(tag: Tag) -> str:
    return str(tag)[:SNIPPET_LENGTH]


def _positioned(soup: BeautifulSoup, tags: Iterable[Tag]) -> Iterator[tuple[int, Tag]]:
    """Pair each tag with its 1-based position among all document tags of the same name."""
    orders: dict[str, dict[int, int]] = {}
    for tag in tags:
        if tag.name not in orders:
            orders[tag.name] = {
                id(other): position
                for position, other in enumerate(soup.find_all(tag.name), start=1)
            }
        yield orders[tag.name][id(tag)], tag


def _node(tag: Tag, position: int, reason: str) -> ViolationNode:
    return ViolationNode(
        locator=f"{tag.name}:nth-of-type({position})",
        failure_reason=reason,
        html=_snippet(tag),
    )


def _has_accessible_name(tag: Tag) -> bool:
    if tag.get_text(strip=True):
        return True
    return bool((tag.get("aria-label") or "").strip() or (tag.get("title") or "").strip())


def check_image_alt(soup: BeautifulSoup) -> list[ViolationNode]:
    """Images must carry an alt attribute; an empty alt marks decoration and passes."""
    return [
        _node(img, position, "Image does not have an alt attribute")
        for position, img in _positioned(soup, soup.find_all("img"))
        if img.get("alt") is None
    ]


def check_link_name(soup: BeautifulSoup) -> list[ViolationNode]:
    return [
        _node(link, position, "Link has no discernible text")
        for position, link in _positioned(soup, soup.find_all("a"))
        if not _has_accessible_name(link)
    ]


def check_button_name(soup: BeautifulSoup) -> list[ViolationNode]:
    return [
        _node(button, position, "Button has no accessible name")
        for position, button in _positioned(soup, soup.select('button, [role="button"]'))
        if not _has_accessible_name(button)
    ]


def check_form_labels(soup: BeautifulSoup) -> list[ViolationNode]:
    """Form fields need a <label for>, aria-label or aria-labelledby. Placeholders don't count."""
    labelled_ids = {label.get("for") for label in soup.find_all("label") if label.get("for")}

    nodes = []
    for position, element in _positioned(soup, soup.find_all(["input", "textarea", "select"])):
        if (
            element.name == "input"
            and (element.get("type") or "text").lower() in UNLABELED_INPUT_TYPES
        ):
            continue
        element_id = element.get("id")
        if element_id and element_id in labelled_ids:
            continue
        if element.get("aria-label") or element.get("aria-labelledby"):
            continue
        reason = (
            "Form element uses placeholder instead of label"
            if element.get("placeholder")
            else "Form element does not have a label"
        )
        nodes.append(_node(element, position, reason))
    return nodes


def check_html_lang(soup: BeautifulSoup) -> list[ViolationNode]:
    html = soup.find("html")
    if html is not None and (html.get("lang") or "").strip():
        return []
    return [
        ViolationNode(
            locator="html",
            failure_reason="The <html> element does not have a lang attribute",
            html="<html>",
        )
    ]


def check_heading_order(soup: BeautifulSoup) -> list[ViolationNode]:
    """Heading levels may go down any amount but only go up by one."""
    nodes = []
    last_level = 0
    for position, heading in _positioned(soup, soup.select(HEADING_SELECTOR)):
        level = int(heading.name[1])
        if last_level and level > last_level + 1:
            nodes.append(
                _node(heading, position, f"Heading level skipped from H{last_level} to H{level}")
            )
        last_level = level
    return nodes


def check_empty_headings(soup: BeautifulSoup) -> list[ViolationNode]:
    return [
        _node(heading, position, "Heading is empty")
        for position, heading in _positioned(soup, soup.select(HEADING_SELECTOR))
        if not heading.get_text(strip=True)
    ]


def check_document_title(soup: BeautifulSoup) -> list[ViolationNode]:
    title = soup.find("title")
    if title is not None and title.get_text(strip=True):
        return []
    return [
        ViolationNode(
            locator="head",
            failure_reason="Document does not have a title element",
            html="<head>...</head>",
        )
    ]


def check_table_headers(soup: BeautifulSoup) -> list[ViolationNode]:
    return [
        _node(table, position, "Table does not have header cells")
        for position, table in _positioned(soup, soup.find_all("table"))
        if table.find("th") is None
    ]


RULES: list[Rule] = [
    Rule(
        rule_id="image-alt",
        impact=Impact.CRITICAL,
        description="Images must have alternate text",
        help="Images must have alternate text",
        wcag_tags=("wcag2a", "wcag111"),
        check=check_image_alt,
    ),
    Rule(
        rule_id="link-name",
        impact=Impact.SERIOUS,
        description="Links must have discernible text",
        help="Links must have discernible text",
        wcag_tags=("wcag2a", "wcag244"),
        check=check_link_name,
    ),
    Rule(
        rule_id="button-name",
        impact=Impact.CRITICAL,
        description="Buttons must have discernible text",
        help="Buttons must have discernible text",
        wcag_tags=("wcag2a", "wcag412"),
        check=check_button_name,
    ),
    Rule(
        rule_id="label",
        impact=Impact.CRITICAL,
        description="Form elements must have labels",
        help="Form <input> elements must have labels",
        wcag_tags=("wcag2a", "wcag131", "wcag412"),
        check=check_form_labels,
    ),
    Rule(
        rule_id="html-has-lang",
        impact=Impact.SERIOUS,
        description="<html> element must have a lang attribute",
        help="<html> element must have a lang attribute",
        wcag_tags=("wcag2a", "wcag311"),
        check=check_html_lang,
    ),
    Rule(
        rule_id="heading-order",
        impact=Impact.MODERATE,
        description="Heading levels should only increase by one",
        help="Heading levels should only increase by one",
        wcag_tags=("wcag2a", "wcag131"),
        check=check_heading_order,
    ),
    Rule(
        rule_id="empty-heading",
        impact=Impact.MINOR,
        description="Headings must not be empty",
        help="Headings must not be empty",
        wcag_tags=("wcag2a", "wcag131"),
        check=check_empty_headings,
    ),
    Rule(
        rule_id="document-title",
        impact=Impact.SERIOUS,
        description="Documents must have <title> element to aid in navigation",
        help="Documents must have <title> element",
        wcag_tags=("wcag2a", "wcag242"),
        check=check_document_title,
    ),
    Rule(
        rule_id="table-header",
        impact=Impact.SERIOUS,
        description="Data tables must have headers",
        help="Tables should have headers",
        wcag_tags=("wcag2a", "wcag131"),
        check=check_table_headers,
    ),
]
