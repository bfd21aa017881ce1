"""Static accessibility scanner.

Runs the fixed rule list in worker.accessibility.rules over a parsed
document and turns the violations into a 0-100 score and a per-principle
WCAG breakdown.
"""

from dataclasses import dataclass, field

import structlog
from bs4 import BeautifulSoup

from worker.accessibility.rules import RULES, AccessibilityViolation, Impact, Rule

logger = structlog.get_logger(__name__)

SCAN_VERSION = "1.0-static"

# Deduction per failing node (capped at MAX_WEIGHTED_NODES nodes per rule)
IMPACT_WEIGHTS: dict[Impact, int] = {
    Impact.CRITICAL: 25,
    Impact.SERIOUS: 15,
    Impact.MODERATE: 8,
    Impact.MINOR: 3,
}
MAX_WEIGHTED_NODES = 5
PASS_BONUS_PER_RULE = 2
MAX_PASS_BONUS = 15

# Deduction per violation from its principle's score
PRINCIPLE_DEDUCTIONS: dict[Impact, int] = {
    Impact.CRITICAL: 20,
    Impact.SERIOUS: 12,
    Impact.MODERATE: 6,
    Impact.MINOR: 3,
}

PRINCIPLES = ("perceivable", "operable", "understandable", "robust")

RULE_PRINCIPLES: dict[str, str] = {
    "image-alt": "perceivable",
    "link-name": "operable",
    "button-name": "operable",
    "label": "understandable",
    "html-has-lang": "understandable",
    "heading-order": "perceivable",
    "empty-heading": "perceivable",
    "document-title": "operable",
    "table-header": "perceivable",
}


@dataclass
class PrincipleScore:
    violations: int = 0
    score: int = 100

    def to_dict(self) -> dict:
        return {"violations": self.violations, "score": self.score}


@dataclass
class RulePass:
    rule_id: str
    description: str

    def to_dict(self) -> dict:
        return {"rule_id": self.rule_id, "description": self.description}


@dataclass
class AccessibilityScanResult:
    """Complete result of scanning one page."""

    url: str
    accessibility_score: int
    violations: list[AccessibilityViolation] = field(default_factory=list)
    passes: list[RulePass] = field(default_factory=list)
    wcag_breakdown: dict[str, PrincipleScore] = field(default_factory=dict)
    page_title: str = "Unknown"
    page_language: str = "unknown"
    scan_version: str = SCAN_VERSION

    def _count(self, impact: Impact) -> int:
        return sum(1 for v in self.violations if v.impact == impact)

    @property
    def critical_count(self) -> int:
        return self._count(Impact.CRITICAL)

    @property
    def serious_count(self) -> int:
        return self._count(Impact.SERIOUS)

    @property
    def moderate_count(self) -> int:
        return self._count(Impact.MODERATE)

    @property
    def minor_count(self) -> int:
        return self._count(Impact.MINOR)

    @property
    def total_violations(self) -> int:
        return len(self.violations)

    @property
    def total_passes(self) -> int:
        return len(self.passes)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "accessibility_score": self.accessibility_score,
            "critical_count": self.critical_count,
            "serious_count": self.serious_count,
            "moderate_count": self.moderate_count,
            "minor_count": self.minor_count,
            "total_violations": self.total_violations,
            "total_passes": self.total_passes,
            "violations": [v.to_dict() for v in self.violations],
            "passes": [p.to_dict() for p in self.passes],
            "wcag_breakdown": {k: v.to_dict() for k, v in self.wcag_breakdown.items()},
            "page_title": self.page_title,
            "page_language": self.page_language,
            "scan_version": self.scan_version,
        }


def calculate_score(violations: list[AccessibilityViolation], total_rules: int) -> int:
    """
    Score a page from its violations.

    Each violation deducts its impact weight once per failing node, counting
    at most five nodes. Every passing rule adds a small bonus, capped at 15.
    """
    deductions = sum(
        IMPACT_WEIGHTS[v.impact] * min(len(v.nodes), MAX_WEIGHTED_NODES) for v in violations
    )
    pass_bonus = min((total_rules - len(violations)) * PASS_BONUS_PER_RULE, MAX_PASS_BONUS)
    return max(0, min(100, 100 - deductions + pass_bonus))


def wcag_breakdown(violations: list[AccessibilityViolation]) -> dict[str, PrincipleScore]:
    """Group violations by WCAG principle; each principle starts at 100."""
    breakdown = {principle: PrincipleScore() for principle in PRINCIPLES}
    for violation in violations:
        principle = breakdown[RULE_PRINCIPLES.get(violation.rule_id, "robust")]
        principle.violations += 1
        principle.score = max(0, principle.score - PRINCIPLE_DEDUCTIONS[violation.impact])
    return breakdown


def scan_document(
    soup: BeautifulSoup,
    url: str,
    rules: list[Rule] | None = None,
) -> AccessibilityScanResult:
    """
    Run every rule against a parsed document.

    The document must be the untouched page, not one that has had its
    navigation or forms stripped.

    Args:
        soup: Parsed HTML document
        url: Page URL (reported back only)
        rules: Rule list to run (defaults to RULES)

    Returns:
        AccessibilityScanResult
    """
    active_rules = rules if rules is not None else RULES

    violations: list[AccessibilityViolation] = []
    passes: list[RulePass] = []
    for rule in active_rules:
        violation = rule.run(soup)
        if violation is None:
            passes.append(RulePass(rule_id=rule.rule_id, description=f"{rule.help} check passed"))
        else:
            violations.append(violation)

    title_tag = soup.find("title")
    html_tag = soup.find("html")

    result = AccessibilityScanResult(
        url=url,
        accessibility_score=calculate_score(violations, len(active_rules)),
        violations=violations,
        passes=passes,
        wcag_breakdown=wcag_breakdown(violations),
        page_title=(title_tag.get_text(strip=True) if title_tag else "") or "Unknown",
        page_language=(html_tag.get("lang") if html_tag else None) or "unknown",
    )

    logger.info(
        "accessibility_scanned",
        url=url,
        score=result.accessibility_score,
        violations=result.total_violations,
        critical=result.critical_count,
    )
    return result


def scan_html(html: str, url: str) -> AccessibilityScanResult:
    """Parse markup and scan it."""
    return scan_document(BeautifulSoup(html or "", "html.parser"), url)
