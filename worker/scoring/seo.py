"""Traditional on-page SEO scoring."""

import re
from dataclasses import dataclass, field

from worker.extraction.structure import HtmlStructure
from worker.scoring.text import markdown_headings, words

TITLE_OPTIMAL = (30, 60)
META_OPTIMAL = (120, 160)

MARKDOWN_IMAGE = re.compile(r"!\[([^\]]*)\]\(")
MARKDOWN_INTERNAL_LINK = re.compile(r"\]\(/")


@dataclass
class SEOScore:
    score: int
    components: dict[str, int] = field(default_factory=dict)
    title_length: int = 0
    meta_length: int = 0
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    word_count: int = 0
    image_count: int = 0
    images_with_alt: int = 0
    internal_links: int = 0

    @property
    def title_optimal(self) -> bool:
        return TITLE_OPTIMAL[0] <= self.title_length <= TITLE_OPTIMAL[1]

    @property
    def meta_optimal(self) -> bool:
        return META_OPTIMAL[0] <= self.meta_length <= META_OPTIMAL[1]

    @property
    def header_structure(self) -> bool:
        return self.h1_count == 1 and self.h2_count >= 2

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": self.components,
            "title_length": self.title_length,
            "title_optimal": self.title_optimal,
            "meta_length": self.meta_length,
            "meta_optimal": self.meta_optimal,
            "h1_count": self.h1_count,
            "h2_count": self.h2_count,
            "h3_count": self.h3_count,
            "header_structure": self.header_structure,
            "word_count": self.word_count,
            "image_count": self.image_count,
            "images_with_alt": self.images_with_alt,
            "has_internal_links": self.internal_links > 0,
        }


def _length_points(length: int, optimal: tuple[int, int], near: tuple[int, int]) -> int:
    """15 inside the optimal range, 10 near it, 5 for anything else non-empty."""
    if length == 0:
        return 0
    if optimal[0] <= length <= optimal[1]:
        return 15
    if near[0] <= length <= near[1]:
        return 10
    return 5


def _word_count_points(word_count: int) -> int:
    if word_count >= 1500:
        return 15
    if word_count >= 800:
        return 12
    if word_count >= 300:
        return 8
    if word_count >= 100:
        return 4
    return 0


def score_seo(
    text: str,
    title: str = "",
    meta_description: str = "",
    html_structure: HtmlStructure | None = None,
) -> SEOScore:
    """
    Score on-page SEO signals.

    Heading, image and link counts come from the page structure when one is
    given, otherwise from the markdown itself. Technical markup (schema,
    canonical, Open Graph) can only be seen in a page structure.
    """
    text = text or ""
    title_length = len((title or "").strip())
    meta_length = len((meta_description or "").strip())
    word_count = len(words(text))

    if html_structure is not None:
        h1, h2, h3 = html_structure.h1_count, html_structure.h2_count, html_structure.h3_count
        images = html_structure.images
        images_with_alt = html_structure.images_with_alt
        internal_links = html_structure.internal_links
        technical_points = 5 * (
            int(html_structure.has_schema)
            + int(html_structure.has_canonical)
            + int(html_structure.has_open_graph)
        )
    else:
        levels = [level for level, _ in markdown_headings(text)]
        h1, h2, h3 = levels.count(1), levels.count(2), levels.count(3)
        alts = MARKDOWN_IMAGE.findall(text)
        images = len(alts)
        images_with_alt = sum(1 for alt in alts if alt.strip())
        internal_links = len(MARKDOWN_INTERNAL_LINK.findall(text))
        technical_points = 0

    heading_points = (8 if h1 == 1 else 0) + (7 if h2 >= 2 else 3 if h2 == 1 else 0) + (5 if h3 >= 1 else 0)

    image_points = 0
    if images:
        image_points = 5 + round(5 * images_with_alt / images)

    components = {
        "title": _length_points(title_length, TITLE_OPTIMAL, (20, 70)),
        "meta_description": _length_points(meta_length, META_OPTIMAL, (70, 200)),
        "headings": heading_points,
        "word_count": _word_count_points(word_count),
        "images": image_points,
        "internal_links": min(internal_links, 5) * 2,
        "technical": technical_points,
    }

    return SEOScore(
        score=min(sum(components.values()), 100),
        components=components,
        title_length=title_length,
        meta_length=meta_length,
        h1_count=h1,
        h2_count=h2,
        h3_count=h3,
        word_count=word_count,
        image_count=images,
        images_with_alt=images_with_alt,
        internal_links=internal_links,
    )
