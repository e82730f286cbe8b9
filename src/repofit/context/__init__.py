"""Budgeted, relevance-ranked content selection.

Reduces a packaged repository dump to the sections most relevant to a query,
within a token budget.

Usage:
    from repofit.context import ContentExtractor

    extractor = ContentExtractor()
    report = extractor.extract(corpus, "how does parseConfig work", max_tokens=8000)
    print(report.content)
"""

from repofit.context.engine import (
    ContentExtractor,
    extract_relevant,
    extract_relevant_content,
    smart_trim,
)
from repofit.context.models import (
    ExtractionReport,
    Framing,
    LineWindow,
    ScoredLine,
    Section,
    Strategy,
)
from repofit.context.splitter import split_sections

__all__ = [
    "ContentExtractor",
    "ExtractionReport",
    "Framing",
    "LineWindow",
    "ScoredLine",
    "Section",
    "Strategy",
    "extract_relevant",
    "extract_relevant_content",
    "smart_trim",
    "split_sections",
]
