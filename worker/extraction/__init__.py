"""Content extraction package."""

from worker.extraction.cleaner import (
    LocatedContent,
    html_to_text,
    locate_main_content,
    strip_noise,
)
from worker.extraction.extractor import (
    ContentExtractor,
    ExtractedPage,
    ExtractorConfig,
    is_error_page,
)
from worker.extraction.structure import HtmlStructure, analyze_html, analyze_html_structure

__all__ = [
    # Extractor
    "ContentExtractor",
    "ExtractorConfig",
    "ExtractedPage",
    "is_error_page",
    # Cleaner
    "LocatedContent",
    "html_to_text",
    "locate_main_content",
    "strip_noise",
    # Structure
    "HtmlStructure",
    "analyze_html",
    "analyze_html_structure",
]
