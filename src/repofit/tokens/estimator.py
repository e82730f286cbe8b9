"""Character-ratio token estimation.

Token counts are approximations: ``ceil(len(text) / ratio)`` inflated by the
profile's safety margin. Length is measured in Unicode code points, so text
with many multi-byte identifiers shifts the real ratio slightly.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from repofit.config import TokenLimits, TokenProfile
from repofit.exceptions import TokenLimitExceeded

DEFAULT_PROFILE = TokenProfile()


class TokenUsage(BaseModel):
    """Estimated token usage of a prompt/response pair."""

    prompt_tokens: int
    response_tokens: int
    total_tokens: int
    is_within_limits: bool


class TokenEstimator:
    """Estimate token counts using a per-model characters-per-token ratio."""

    def __init__(self, profile: TokenProfile | None = None) -> None:
        self.profile = profile or DEFAULT_PROFILE

    def estimate_length(self, length: int, model_id: str | None = None) -> int:
        """Estimate tokens for a text of `length` characters."""
        if length <= 0:
            return 0
        raw = math.ceil(length / self.profile.ratio_for(model_id))
        return math.ceil(raw * (1 + self.profile.safety_margin))

    def estimate(self, text: str, model_id: str | None = None) -> int:
        """Estimate token count for a string."""
        if not text:
            return 0
        return self.estimate_length(len(text), model_id)

    def chars_within(self, max_tokens: int, model_id: str | None = None) -> int:
        """Longest text length whose estimate does not exceed `max_tokens`."""
        if max_tokens <= 0:
            return 0
        ratio = self.profile.ratio_for(model_id)
        raw_cap = math.floor(max_tokens / (1 + self.profile.safety_margin))
        length = math.floor(raw_cap * ratio) + 1
        # Float rounding in the closed form can be off by a little either way.
        while length > 0 and self.estimate_length(length, model_id) > max_tokens:
            length -= 1
        while self.estimate_length(length + 1, model_id) <= max_tokens:
            length += 1
        return length

    def validate(self, text: str, max_tokens: int, model_id: str | None = None) -> None:
        """Raise TokenLimitExceeded if `text` is estimated over `max_tokens`."""
        estimated = self.estimate(text, model_id)
        if estimated > max_tokens:
            raise TokenLimitExceeded(estimated, max_tokens)

    def usage(
        self,
        prompt: str,
        response: str,
        model_id: str | None = None,
        limits: TokenLimits | None = None,
    ) -> TokenUsage:
        """Calculate token usage for a prompt and its response."""
        limits = limits or TokenLimits()
        prompt_tokens = self.estimate(prompt, model_id)
        response_tokens = self.estimate(response, model_id)
        total_tokens = prompt_tokens + response_tokens
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            response_tokens=response_tokens,
            total_tokens=total_tokens,
            is_within_limits=(
                prompt_tokens <= limits.max_prompt_tokens
                and response_tokens <= limits.max_response_tokens
                and total_tokens <= limits.max_total_tokens
            ),
        )


def estimate_tokens(
    text: str, model_id: str | None = None, profile: TokenProfile | None = None
) -> int:
    """Estimate token count for `text` under the given (or default) profile."""
    return TokenEstimator(profile).estimate(text, model_id)


def validate_budget(
    text: str,
    max_tokens: int,
    model_id: str | None = None,
    profile: TokenProfile | None = None,
) -> None:
    """Fail with TokenLimitExceeded when `text` does not fit `max_tokens`."""
    TokenEstimator(profile).validate(text, max_tokens, model_id)


def calculate_token_usage(
    prompt: str,
    response: str,
    model_id: str | None = None,
    limits: TokenLimits | None = None,
    profile: TokenProfile | None = None,
) -> TokenUsage:
    return TokenEstimator(profile).usage(prompt, response, model_id, limits)
