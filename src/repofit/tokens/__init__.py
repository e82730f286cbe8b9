"""Token estimation and budget trimming."""

from repofit.tokens.estimator import (
    TokenEstimator,
    TokenUsage,
    calculate_token_usage,
    estimate_tokens,
    validate_budget,
)
from repofit.tokens.trimmer import TrimOptions, trim_to_budget

__all__ = [
    "TokenEstimator",
    "TokenUsage",
    "TrimOptions",
    "calculate_token_usage",
    "estimate_tokens",
    "trim_to_budget",
    "validate_budget",
]
