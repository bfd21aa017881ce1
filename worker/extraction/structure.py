"""HTML structure signals for content scoring.

Counts headings, links, images and markup hints (JSON-LD, canonical,
Open Graph) from the raw page. This must run on the untouched document:
the extractor strips navigation, footers and scripts, which would otherwise
hide links, images and schema blocks from the counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog
from bs4 import BeautifulSoup

from worker.crawler.url import is_countable_link, is_internal_link

logger = structlog.get_logger(__name__)

FAQ_SCHEMA_PATTERN = re.compile(r'"@type":\s?"FAQPage"')


@dataclass(frozen=True)
class HtmlStructure:
    """Structural signals captured from a page before cleaning."""

    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    h4_count: int = 0
    internal_links: int = 0
    external_links: int = 0
    images: int = 0
    images_with_alt: int = 0
    has_schema: bool = False
    has_faq_schema: bool = False
    has_canonical: bool = False
    has_open_graph: bool = False

    @property
    def heading_count(self) -> int:
        """Sub-headings (H2-H4) used as a topical depth signal."""
        return self.h2_count + self.h3_count + self.h4_count

    @property
    def alt_coverage(self) -> float:
        if self.images == 0:
            return 1.0
        return self.images_with_alt / self.images

    def to_dict(self) -> dict:
        return {
            "h1_count": self.h1_count,
            "h2_count": self.h2_count,
            "h3_count": self.h3_count,
            "h4_count": self.h4_count,
            "internal_links": self.internal_links,
            "external_links": self.external_links,
            "images": self.images,
            "images_with_alt": self.images_with_alt,
            "has_schema": self.has_schema,
            "has_faq_schema": self.has_faq_schema,
            "has_canonical": self.has_canonical,
            "has_open_graph": self.has_open_graph,
        }


def analyze_html_structure(soup: BeautifulSoup, page_url: str, raw_html: str) -> HtmlStructure:
    """
    Count structural signals in a parsed document.

    Args:
        soup: Parsed document (must not have been cleaned yet)
        page_url: URL of the page, used to classify links
        raw_html: Original markup, used for literal schema markers

    Returns:
        HtmlStructure with all counts (zero when elements are missing)
    """
    internal = 0
    external = 0
    for a_tag in soup.find_all("a", href=True):
        href = a_tag.get("href")
        if not is_countable_link(href):
            continue
        if is_internal_link(href.strip(), page_url):
            internal += 1
        else:
            external += 1

    images = soup.find_all("img")
    images_with_alt = sum(1 for img in images if (img.get("alt") or "").strip())

    structure = HtmlStructure(
        h1_count=len(soup.find_all("h1")),
        h2_count=len(soup.find_all("h2")),
        h3_count=len(soup.find_all("h3")),
        h4_count=len(soup.find_all("h4")),
        internal_links=internal,
        external_links=external,
        images=len(images),
        images_with_alt=images_with_alt,
        has_schema=soup.find("script", attrs={"type": "application/ld+json"}) is not None,
        has_faq_schema=bool(FAQ_SCHEMA_PATTERN.search(raw_html or "")),
        has_canonical=soup.find("link", rel="canonical") is not None,
        has_open_graph=soup.find("meta", property=re.compile(r"^og:")) is not None,
    )

    logger.debug(
        "html_structure_analyzed",
        url=page_url,
        headings=structure.heading_count,
        internal_links=internal,
        external_links=external,
    )
    return structure


def analyze_html(raw_html: str, page_url: str) -> HtmlStructure:
    """Convenience wrapper that parses the markup first."""
    soup = BeautifulSoup(raw_html or "", "html.parser")
    return analyze_html_structure(soup, page_url, raw_html)
