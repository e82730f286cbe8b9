"""Head/tail trimming of unstructured text to a token budget."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from repofit.log import SupportsLogging, get_logger
from repofit.tokens.estimator import TokenEstimator

ELLIPSIS = "..."

# Share of the kept characters taken from the favored end
FAVORED_SHARE = 0.7
EVEN_SHARE = 0.5


@dataclass(frozen=True)
class TrimOptions:
    """How to trim text that does not fit its budget."""

    preserve_start: bool = False
    preserve_end: bool = False
    model_id: str | None = None
    add_ellipsis: bool = False
    insert_message: str | None = None


def default_trim_message(max_tokens: int, removed_tokens: int) -> str:
    return (
        f"\n\n[...CONTENT TRIMMED TO FIT {max_tokens} TOKEN LIMIT "
        f"({removed_tokens} tokens removed)...]\n\n"
    )


def trim_to_budget(
    text: str,
    max_tokens: int,
    options: TrimOptions | None = None,
    *,
    preserve_start: bool | None = None,
    preserve_end: bool | None = None,
    model_id: str | None = None,
    add_ellipsis: bool | None = None,
    insert_message: str | None = None,
    estimator: TokenEstimator | None = None,
    logger: SupportsLogging | None = None,
) -> str:
    """Trim `text` so its estimated token count fits `max_tokens`.

    Text already within budget is returned unchanged. Otherwise a head and/or
    tail slice is kept in proportion to the budget:

    - ``preserve_end``: keep only the tail (70% share), optionally prefixed
      with an ellipsis.
    - ``preserve_start``: keep only the head (70% share), optionally followed
      by an ellipsis.
    - neither: keep head and tail evenly with a removal marker between them.

    The composed result is clamped so it never estimates above `max_tokens`.
    Never raises; a non-positive budget yields an empty string.
    """
    # Keyword flags override the matching fields of `options`
    overrides = {
        name: value
        for name, value in (
            ("preserve_start", preserve_start),
            ("preserve_end", preserve_end),
            ("model_id", model_id),
            ("add_ellipsis", add_ellipsis),
            ("insert_message", insert_message),
        )
        if value is not None
    }
    options = replace(options or TrimOptions(), **overrides)
    estimator = estimator or TokenEstimator()
    log = get_logger(logger, __name__)

    estimated = estimator.estimate(text, options.model_id)
    if estimated <= max_tokens:
        return text
    if max_tokens <= 0:
        log.info(f"Trimming content from {estimated} tokens to nothing (budget {max_tokens})")
        return ""

    log.info(f"Trimming content from {estimated} tokens to {max_tokens} tokens")

    keep_ratio = max_tokens / estimated
    total_keep = math.floor(len(text) * keep_ratio)

    if options.preserve_end:
        head_chars = math.floor(total_keep * (1 - FAVORED_SHARE))
    elif options.preserve_start:
        head_chars = math.floor(total_keep * FAVORED_SHARE)
    else:
        head_chars = math.floor(total_keep * EVEN_SHARE)
    tail_chars = total_keep - head_chars

    if options.preserve_end:
        decoration = ELLIPSIS if options.add_ellipsis else ""
        kept = tail_chars
    elif options.preserve_start:
        decoration = ELLIPSIS if options.add_ellipsis else ""
        kept = head_chars
    else:
        decoration = options.insert_message or default_trim_message(
            max_tokens, estimated - max_tokens
        )
        kept = total_keep

    # Clamp to what the estimator admits, dropping decoration if it alone
    # would not fit.
    room = estimator.chars_within(max_tokens, options.model_id)
    if len(decoration) > room:
        decoration = ""
    if kept + len(decoration) > room:
        kept = room - len(decoration)
        if options.preserve_end:
            tail_chars = kept
        elif options.preserve_start:
            head_chars = kept
        else:
            head_chars = math.floor(kept * EVEN_SHARE)
            tail_chars = kept - head_chars

    if options.preserve_end:
        result = decoration + _tail(text, tail_chars)
    elif options.preserve_start:
        result = text[:head_chars] + decoration
    else:
        result = text[:head_chars] + decoration + _tail(text, tail_chars)

    log.debug(f"Trimmed content from {len(text)} chars to {len(result)} chars")
    return result


def _tail(text: str, count: int) -> str:
    if count <= 0:
        return ""
    return text[-count:]
