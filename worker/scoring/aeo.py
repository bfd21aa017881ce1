"""Answer-Engine Optimization (AEO) scoring.

Measures how easily an AI answer engine can lift a direct answer, a
citation or a structured snippet out of the content. Five capped
components add up to a 0-100 score:

    Answer Quality          30  direct answer anywhere (15) and in paragraph one (15)
    Citation-Worthiness     25  statistics (10), quotable statements (3 each, max 3), definitions (5)
    Structured Data         20  FAQ block or FAQ schema (10), how-to steps (5), data table (5)
    AI-Friendly Formatting  15  2 per FAQ question (max 5), how-to steps (5)
    Topical Authority       10  sub-headings (max 5), internal links (max 5)
"""

import re
from dataclasses import dataclass, field

from worker.extraction.structure import HtmlStructure
from worker.scoring.text import (
    TABLE_SEPARATOR,
    body_paragraphs,
    count_lines,
    first_paragraph,
    has_statistics,
    markdown_headings,
    split_sentences,
    words,
)

DIRECT_ANSWER_PATTERNS = re.compile(
    r"\bthe (?:short |simple |quick )?answer is\b"
    r"|\bsimply put\b"
    r"|\bin short\b"
    r"|\bin a nutshell\b"
    r"|\bthe best way to\b"
    r"|\bthe key is\b"
    r"|^(?:yes|no),",
    re.IGNORECASE | re.MULTILINE,
)

DEFINITION_PATTERNS = re.compile(
    r"\bis defined as\b"
    r"|\brefers to\b"
    r"|\bis known as\b"
    r"|\bdefinition of\b"
    r"|\bmeans that\b"
    r"|\bstands for\b",
    re.IGNORECASE,
)

QUOTABLE_VERBS = re.compile(
    r"\b(?:is|are|helps|provides|requires|reduces|increases|improves|allows|ensures)\b",
    re.IGNORECASE,
)

FAQ_MARKER = re.compile(r"\b(?:faq|frequently asked questions)\b", re.IGNORECASE)
HOW_TO_STEP = re.compile(r"^\s*(?:\d+[.)]\s|step\s+\d+)", re.IGNORECASE)
MARKDOWN_INTERNAL_LINK = re.compile(r"\]\(/")

QUOTABLE_MIN_WORDS = 8
QUOTABLE_MAX_WORDS = 30
MAX_QUOTABLE = 3
MIN_HOW_TO_STEPS = 3
MIN_QUESTION_HEADINGS = 3


@dataclass
class AEOScore:
    """AEO score with its component points and detected signals."""

    score: int
    components: dict[str, int] = field(default_factory=dict)
    has_direct_answer: bool = False
    answer_in_first_paragraph: bool = False
    has_statistics: bool = False
    quotable_statements: int = 0
    has_definitions: bool = False
    has_faq: bool = False
    faq_count: int = 0
    has_how_to: bool = False
    has_table: bool = False
    topical_depth: int = 0
    internal_links: int = 0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": self.components,
            "has_direct_answer": self.has_direct_answer,
            "answer_in_first_paragraph": self.answer_in_first_paragraph,
            "has_statistics": self.has_statistics,
            "quotable_statements": self.quotable_statements,
            "has_definitions": self.has_definitions,
            "has_faq": self.has_faq,
            "faq_count": self.faq_count,
            "has_how_to": self.has_how_to,
            "has_table": self.has_table,
            "topical_depth": self.topical_depth,
            "internal_links": self.internal_links,
        }


def count_quotable_statements(text: str) -> int:
    """Self-contained declarative sentences of 8-30 words."""
    count = 0
    for sentence in split_sentences(text):
        if not sentence.endswith("."):
            continue
        if QUOTABLE_MIN_WORDS <= len(words(sentence)) <= QUOTABLE_MAX_WORDS and QUOTABLE_VERBS.search(
            sentence
        ):
            count += 1
    return count


def count_faq_questions(text: str) -> tuple[bool, int]:
    """
    Detect an FAQ block and count its questions.

    With an explicit FAQ marker, every question line after it counts.
    Without one, a run of question headings also qualifies.
    """
    lines = (text or "").splitlines()
    for index, line in enumerate(lines):
        if FAQ_MARKER.search(line):
            questions = sum(1 for after in lines[index + 1 :] if after.strip().endswith("?"))
            return True, questions

    question_headings = sum(1 for _, heading in markdown_headings(text) if heading.endswith("?"))
    if question_headings >= MIN_QUESTION_HEADINGS:
        return True, question_headings
    return False, 0


def score_aeo(text: str, html_structure: HtmlStructure | None = None) -> AEOScore:
    """
    Score content for answer-engine readiness.

    Args:
        text: Markdown-like content
        html_structure: Structure counts from the page, when audited from a URL

    Returns:
        AEOScore (0-100)
    """
    text = text or ""

    # Answer Quality
    answer_anywhere = any(DIRECT_ANSWER_PATTERNS.search(p) for p in body_paragraphs(text))
    answer_first = bool(DIRECT_ANSWER_PATTERNS.search(first_paragraph(text)))
    answer_points = (15 if answer_anywhere else 0) + (15 if answer_first else 0)

    # Citation-Worthiness
    statistics = has_statistics(text)
    quotable = count_quotable_statements(text)
    definitions = bool(DEFINITION_PATTERNS.search(text))
    citation_points = min(
        (10 if statistics else 0) + 3 * min(quotable, MAX_QUOTABLE) + (5 if definitions else 0),
        25,
    )

    # Structured Data
    has_faq, faq_count = count_faq_questions(text)
    if html_structure is not None and html_structure.has_faq_schema:
        has_faq = True
    how_to = count_lines(text, HOW_TO_STEP) >= MIN_HOW_TO_STEPS
    table = count_lines(text, TABLE_SEPARATOR) > 0
    structured_points = min(
        (10 if has_faq else 0) + (5 if how_to else 0) + (5 if table else 0),
        20,
    )

    # AI-Friendly Formatting
    formatting_points = min(min(faq_count, 5) * 2 + (5 if how_to else 0), 15)

    # Topical Authority
    if html_structure is not None:
        depth = html_structure.heading_count
        internal_links = html_structure.internal_links
    else:
        depth = sum(1 for level, _ in markdown_headings(text) if 2 <= level <= 4)
        internal_links = len(MARKDOWN_INTERNAL_LINK.findall(text))
    authority_points = min(depth, 5) + min(internal_links, 5)

    components = {
        "answer_quality": answer_points,
        "citation_worthiness": citation_points,
        "structured_data": structured_points,
        "ai_formatting": formatting_points,
        "topical_authority": authority_points,
    }

    return AEOScore(
        score=min(sum(components.values()), 100),
        components=components,
        has_direct_answer=answer_anywhere,
        answer_in_first_paragraph=answer_first,
        has_statistics=statistics,
        quotable_statements=quotable,
        has_definitions=definitions,
        has_faq=has_faq,
        faq_count=faq_count,
        has_how_to=how_to,
        has_table=table,
        topical_depth=depth,
        internal_links=internal_links,
    )
