"""Text helpers shared by the content scorers.

Content is treated as markdown-like plain text: paragraphs are blocks
separated by blank lines and headings are ``#``-prefixed lines.
"""

import re

HEADING_LINE = re.compile(r"^\s{0,3}(#{1,6})\s+(.+?)\s*#*\s*$")
TABLE_LINE = re.compile(r"^\s*\|.*\|\s*$")
TABLE_SEPARATOR = re.compile(r"^\s*\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)+\|?\s*$")
BULLET_LINE = re.compile(r"^\s*[-*•]\s+\S")
NUMBERED_LINE = re.compile(r"^\s*\d+[.)]\s+\S")
LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")
WORD = re.compile(r"[A-Za-z0-9]+(?:['’-][A-Za-z0-9]+)*")
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
VOWEL_GROUPS = re.compile(r"[aeiouy]+")

STATISTIC_PATTERN = re.compile(
    r"\d+(?:\.\d+)?\s?%"
    r"|\b\d+(?:\.\d+)?\s?(?:percent|million|billion|thousand)\b"
    r"|\b\d{1,3}(?:,\d{3})+\b",
    re.IGNORECASE,
)


def split_paragraphs(text: str) -> list[str]:
    """Split text into non-empty blank-line separated blocks."""
    return [block.strip() for block in re.split(r"\n\s*\n", text or "") if block.strip()]


def body_paragraphs(text: str) -> list[str]:
    """Paragraphs that are not headings or tables."""
    paragraphs = []
    for block in split_paragraphs(text):
        lines = block.splitlines()
        if len(lines) == 1 and HEADING_LINE.match(lines[0]):
            continue
        if all(TABLE_LINE.match(line) for line in lines):
            continue
        paragraphs.append(block)
    return paragraphs


def first_paragraph(text: str) -> str:
    paragraphs = body_paragraphs(text)
    return paragraphs[0] if paragraphs else ""


def markdown_headings(text: str) -> list[tuple[int, str]]:
    """Return (level, text) for every ``#`` heading line."""
    headings = []
    for line in (text or "").splitlines():
        match = HEADING_LINE.match(line)
        if match:
            headings.append((len(match.group(1)), match.group(2)))
    return headings


def prose_lines(text: str) -> list[str]:
    """Lines that carry sentences: headings and table rows removed, list markers stripped."""
    lines = []
    for line in (text or "").splitlines():
        if not line.strip() or HEADING_LINE.match(line) or TABLE_LINE.match(line):
            continue
        lines.append(LIST_MARKER.sub("", line).strip())
    return lines


def split_sentences(text: str) -> list[str]:
    sentences = []
    for line in prose_lines(text):
        for sentence in SENTENCE_BREAK.split(line):
            sentence = sentence.strip()
            if WORD.search(sentence):
                sentences.append(sentence)
    return sentences


def words(text: str) -> list[str]:
    return WORD.findall(text or "")


def count_syllables(word: str) -> int:
    """Estimate syllables from vowel groups, dropping a silent trailing e."""
    word = word.lower()
    if not word:
        return 0
    if len(word) <= 3:
        return 1
    if word.endswith("e") and not word.endswith(("le", "ee")):
        word = word[:-1]
    return max(1, len(VOWEL_GROUPS.findall(word)))


def has_statistics(text: str) -> bool:
    return bool(STATISTIC_PATTERN.search(text or ""))


def count_lines(text: str, pattern: re.Pattern) -> int:
    return sum(1 for line in (text or "").splitlines() if pattern.match(line))
