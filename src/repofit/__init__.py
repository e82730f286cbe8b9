"""repofit - fit packaged repository text into a model's token budget."""

__version__ = "0.1.0"

from repofit.context import ContentExtractor, extract_relevant_content, smart_trim
from repofit.exceptions import TokenLimitExceeded
from repofit.tokens import estimate_tokens, trim_to_budget, validate_budget

__all__ = [
    "ContentExtractor",
    "TokenLimitExceeded",
    "__version__",
    "estimate_tokens",
    "extract_relevant_content",
    "smart_trim",
    "trim_to_budget",
    "validate_budget",
]
