"""Query keyword extraction and section relevance scoring."""

from repofit.search.keywords import extract_keywords
from repofit.search.scorer import relevance_score, static_priority

__all__ = ["extract_keywords", "relevance_score", "static_priority"]
