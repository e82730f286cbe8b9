"""Custom exceptions for repofit."""


class RepofitError(Exception):
    """Base exception for all repofit errors."""


class ConfigError(RepofitError):
    """Configuration-related errors."""


class TokenLimitExceeded(RepofitError):
    """Raised when content is estimated to exceed a hard token limit."""

    def __init__(self, estimated: int, maximum: int):
        self.estimated = estimated
        self.maximum = maximum
        super().__init__(
            f"Content exceeds token limit: estimated {estimated} tokens "
            f"exceeds maximum {maximum} tokens"
        )

    def user_message(self) -> str:
        return (
            f"Token Limit Error: {self}\n\n"
            "The content exceeds the maximum token limit. Consider reducing the "
            "scope of analysis or using a different approach."
        )
