"""Engagement scoring: signals that keep a human reader on the page."""

import re
from dataclasses import dataclass, field

from worker.scoring.text import (
    BULLET_LINE,
    NUMBERED_LINE,
    body_paragraphs,
    count_lines,
    first_paragraph,
    has_statistics,
    words,
)

HOOK_OPENERS = re.compile(
    r"^(?:imagine|did you know|what if|picture this|have you ever|here's|here is|ever wondered)\b",
    re.IGNORECASE,
)
EMPHASIS_PATTERN = re.compile(r"\*\*[^*\n]+\*\*|__[^_\n]+__")
CTA_PATTERN = re.compile(
    r"\b(?:contact us|call (?:us|now|today)|get started|sign up|subscribe|learn more"
    r"|book (?:a|an|your)|schedule (?:a|an|your)|request a (?:quote|demo|consultation)"
    r"|get in touch|get a (?:free )?quote|try it|start (?:your|a) free|download|buy now|shop now)\b",
    re.IGNORECASE,
)

SHORT_PARAGRAPH_WORDS = 80
MEDIUM_PARAGRAPH_WORDS = 120


@dataclass
class EngagementScore:
    score: int
    components: dict[str, int] = field(default_factory=dict)
    has_hook: bool = False
    has_question: bool = False
    has_bullet_points: bool = False
    has_numbered_list: bool = False
    has_emphasis: bool = False
    has_cta: bool = False
    avg_paragraph_words: float = 0.0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": self.components,
            "has_hook": self.has_hook,
            "has_question": self.has_question,
            "has_bullet_points": self.has_bullet_points,
            "has_numbered_list": self.has_numbered_list,
            "has_emphasis": self.has_emphasis,
            "has_cta": self.has_cta,
            "avg_paragraph_words": round(self.avg_paragraph_words, 1),
        }


def has_hook(opening: str) -> bool:
    """An opening that asks a question, leads with a number or uses a hook phrase."""
    opening = opening.strip()
    if not opening:
        return False
    first_sentence = re.split(r"(?<=[.!?])\s+", opening, maxsplit=1)[0]
    return (
        first_sentence.endswith("?")
        or has_statistics(first_sentence)
        or bool(HOOK_OPENERS.match(first_sentence))
    )


def score_engagement(text: str) -> EngagementScore:
    text = text or ""

    hook = has_hook(first_paragraph(text))
    question = "?" in text
    bullets = count_lines(text, BULLET_LINE) > 0
    numbered = count_lines(text, NUMBERED_LINE) > 0
    emphasis = bool(EMPHASIS_PATTERN.search(text))
    cta = bool(CTA_PATTERN.search(text))

    paragraphs = body_paragraphs(text)
    avg_words = (
        sum(len(words(p)) for p in paragraphs) / len(paragraphs) if paragraphs else 0.0
    )
    if not paragraphs:
        paragraph_points = 0
    elif avg_words <= SHORT_PARAGRAPH_WORDS:
        paragraph_points = 15
    elif avg_words <= MEDIUM_PARAGRAPH_WORDS:
        paragraph_points = 8
    else:
        paragraph_points = 0

    components = {
        "hook": 20 if hook else 0,
        "question": 10 if question else 0,
        "bullet_points": 15 if bullets else 0,
        "numbered_list": 15 if numbered else 0,
        "emphasis": 10 if emphasis else 0,
        "cta": 15 if cta else 0,
        "short_paragraphs": paragraph_points,
    }

    return EngagementScore(
        score=min(sum(components.values()), 100),
        components=components,
        has_hook=hook,
        has_question=question,
        has_bullet_points=bullets,
        has_numbered_list=numbered,
        has_emphasis=emphasis,
        has_cta=cta,
        avg_paragraph_words=avg_words,
    )
