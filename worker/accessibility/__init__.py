"""Rule-based WCAG accessibility scanning."""

from worker.accessibility.rules import (
    RULES,
    AccessibilityViolation,
    Impact,
    Rule,
    ViolationNode,
)
from worker.accessibility.scanner import (
    AccessibilityScanResult,
    PrincipleScore,
    calculate_score,
    scan_document,
    scan_html,
    wcag_breakdown,
)

__all__ = [
    "RULES",
    "AccessibilityViolation",
    "AccessibilityScanResult",
    "Impact",
    "PrincipleScore",
    "Rule",
    "ViolationNode",
    "calculate_score",
    "scan_document",
    "scan_html",
    "wcag_breakdown",
]
