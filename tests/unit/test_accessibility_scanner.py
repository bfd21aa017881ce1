"""Tests for the static accessibility scanner."""

from bs4 import BeautifulSoup

from tests.fixtures import ARTICLE_HTML, article_page
from worker.accessibility.rules import (
    RULES,
    AccessibilityViolation,
    Impact,
    ViolationNode,
    check_form_labels,
    check_heading_order,
)
from worker.accessibility.scanner import calculate_score, scan_html, wcag_breakdown

URL = "https://www.example.com/page"


def _page(body: str, lang: str = "en", title: str = "Test page") -> str:
    return f'<html lang="{lang}"><head><title>{title}</title></head><body>{body}</body></html>'


def _violation(rule_id: str, impact: Impact, nodes: int = 1) -> AccessibilityViolation:
    return AccessibilityViolation(
        rule_id=rule_id,
        impact=impact,
        description="",
        help="",
        help_url="",
        nodes=[ViolationNode(locator="x", failure_reason="", html="") for _ in range(nodes)],
    )


class TestScanHtml:
    """Tests for scan_html."""

    def test_three_images_without_alt(self) -> None:
        """One image-alt violation with three nodes: 100 - 3*25 + 15 = 40."""
        html = _page('<img src="a.png"><img src="b.png"><img src="c.png">')
        result = scan_html(html, URL)

        assert result.accessibility_score == 40
        assert result.total_violations == 1
        violation = result.violations[0]
        assert violation.rule_id == "image-alt"
        assert violation.impact == Impact.CRITICAL
        assert len(violation.nodes) == 3
        assert violation.nodes[1].locator == "img:nth-of-type(2)"
        assert violation.help_url == "https://dequeuniversity.com/rules/axe/4.4/image-alt"

    def test_clean_page_scores_100(self) -> None:
        result = scan_html(ARTICLE_HTML, URL)

        assert result.violations == []
        assert result.total_passes == len(RULES)
        assert result.accessibility_score == 100
        assert result.page_language == "en"
        assert result.page_title.startswith("How to Choose")

    def test_decorative_image_passes(self) -> None:
        """An empty alt marks a decorative image."""
        result = scan_html(_page('<img src="divider.png" alt="">'), URL)
        assert all(v.rule_id != "image-alt" for v in result.violations)

    def test_missing_lang_and_title(self) -> None:
        result = scan_html("<html><head></head><body><p>Hi</p></body></html>", URL)
        rule_ids = {v.rule_id for v in result.violations}

        assert rule_ids == {"html-has-lang", "document-title"}
        assert result.page_title == "Unknown"
        assert result.page_language == "unknown"
        # 100 - 15 - 15 + min(7 * 2, 15)
        assert result.accessibility_score == 84

    def test_links_and_buttons_need_names(self) -> None:
        html = _page(
            '<a href="/x"></a><a href="/y" aria-label="Next page"></a>'
            '<button></button><button>Save</button><div role="button" title="Close"></div>'
        )
        result = scan_html(html, URL)
        by_rule = {v.rule_id: v for v in result.violations}

        assert len(by_rule["link-name"].nodes) == 1
        assert len(by_rule["button-name"].nodes) == 1

    def test_table_without_headers(self) -> None:
        html = _page("<table><tr><td>1</td></tr></table><table><tr><th>H</th></tr></table>")
        result = scan_html(html, URL)
        by_rule = {v.rule_id: v for v in result.violations}

        assert by_rule["table-header"].nodes[0].locator == "table:nth-of-type(1)"

    def test_locators_count_positions_per_tag(self) -> None:
        html = _page(
            '<input type="hidden" name="csrf"><input type="text" id="a">'
            '<input type="email" id="b"><select></select>'
            '<div>Intro</div><button>Ok</button><div role="button"></div>'
            "<h1>Top</h1><h3>Deep</h3>"
        )
        result = scan_html(html, URL)
        by_rule = {v.rule_id: v for v in result.violations}

        assert [n.locator for n in by_rule["label"].nodes] == [
            "input:nth-of-type(2)",
            "input:nth-of-type(3)",
            "select:nth-of-type(1)",
        ]
        assert by_rule["button-name"].nodes[0].locator == "div:nth-of-type(2)"
        assert by_rule["heading-order"].nodes[0].locator == "h3:nth-of-type(1)"

    def test_snippets_are_truncated(self) -> None:
        long_src = "a" * 500
        result = scan_html(_page(f'<img src="{long_src}.png">'), URL)

        assert len(result.violations[0].nodes[0].html) == 200

    def test_score_never_negative(self) -> None:
        body = "<img>" * 10 + "<a href='/'></a>" * 10 + "<button></button>" * 10
        result = scan_html(article_page(body=body, lang=None), URL)

        assert result.accessibility_score == 0

    def test_to_dict(self) -> None:
        d = scan_html(_page("<img src='a.png'>"), URL).to_dict()

        assert d["critical_count"] == 1
        assert d["scan_version"] == "1.0-static"
        assert set(d["wcag_breakdown"]) == {"perceivable", "operable", "understandable", "robust"}


class TestRules:
    """Tests for individual rule checks."""

    def test_heading_order_allows_going_down(self) -> None:
        soup = BeautifulSoup("<h1>A</h1><h2>B</h2><h3>C</h3><h2>D</h2><h3>E</h3>", "html.parser")
        assert check_heading_order(soup) == []

    def test_heading_order_flags_skips(self) -> None:
        soup = BeautifulSoup("<h1>A</h1><h3>B</h3>", "html.parser")
        nodes = check_heading_order(soup)

        assert len(nodes) == 1
        assert nodes[0].failure_reason == "Heading level skipped from H1 to H3"

    def test_form_labels(self) -> None:
        soup = BeautifulSoup(
            '<label for="email">Email</label><input id="email">'
            '<input aria-label="Search">'
            '<input type="hidden" name="token">'
            '<input type="submit">'
            '<input placeholder="Your name">'
            "<textarea></textarea>",
            "html.parser",
        )
        nodes = check_form_labels(soup)

        assert [n.failure_reason for n in nodes] == [
            "Form element uses placeholder instead of label",
            "Form element does not have a label",
        ]


class TestScoring:
    """Tests for score and breakdown calculation."""

    def test_weighted_nodes_are_capped(self) -> None:
        violations = [_violation("image-alt", Impact.CRITICAL, nodes=8)]
        # 5 nodes * 25 = 125 deducted, clamped to 0
        assert calculate_score(violations, total_rules=9) == 0

    def test_pass_bonus_is_capped(self) -> None:
        violations = [_violation("empty-heading", Impact.MINOR)]
        assert calculate_score(violations, total_rules=20) == 100

    def test_breakdown_deducts_by_impact(self) -> None:
        breakdown = wcag_breakdown(
            [
                _violation("image-alt", Impact.CRITICAL),
                _violation("heading-order", Impact.MODERATE),
                _violation("link-name", Impact.SERIOUS),
            ]
        )

        assert breakdown["perceivable"].violations == 2
        assert breakdown["perceivable"].score == 74
        assert breakdown["operable"].score == 88
        assert breakdown["understandable"].score == 100
        assert breakdown["robust"].score == 100

    def test_breakdown_bounded(self) -> None:
        breakdown = wcag_breakdown([_violation("image-alt", Impact.CRITICAL)] * 10)
        assert breakdown["perceivable"].score == 0
