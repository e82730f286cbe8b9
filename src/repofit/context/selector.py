"""Greedy packing of prioritized sections into a token budget."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from repofit.context.models import Section, Selection
from repofit.log import SupportsLogging, get_logger
from repofit.tokens.estimator import TokenEstimator
from repofit.tokens.trimmer import TrimOptions, trim_to_budget

SECTION_SEPARATOR = "\n\n"

# The introduction (summary + directory tree) is charged first and never trimmed,
# even when it alone exceeds the budget.
INTRO_ALWAYS_INCLUDED = True

# After the first section is cut to fit, nothing further is considered even if a
# later, smaller section would still fit.
STOP_AFTER_FORCED_TRIM = True


@dataclass(frozen=True)
class SelectionOptions:
    max_sections: int = 15
    prefer_complete: bool = False  # skip sections that do not fit whole
    model_id: str | None = None


def trimmed_section_marker(name: str) -> str:
    return f"\n\n[...TRIMMED CONTENT FROM {name}...]\n\n"


def order_sections(sections: Sequence[Section]) -> list[Section]:
    """Highest priority first; equal priorities keep corpus order."""
    return sorted(sections, key=lambda s: s.priority, reverse=True)


def select_sections(
    sections: Sequence[Section],
    max_tokens: int,
    *,
    intro: Section | None = None,
    options: SelectionOptions | None = None,
    estimator: TokenEstimator | None = None,
    logger: SupportsLogging | None = None,
) -> Selection:
    """Greedily pack sections into `max_tokens`.

    Sections are visited in priority order and included whole while they fit.
    The first one that does not fit is either skipped (``prefer_complete``) or
    trimmed to the remaining budget, after which selection stops.

    Each section after the first is charged together with its separator, so
    the estimate of the joined output stays within the budget. The only
    exception is an introduction that is larger than the budget by itself.
    """
    options = options or SelectionOptions()
    estimator = estimator or TokenEstimator()
    log = get_logger(logger, __name__)

    selection = Selection()
    parts: list[str] = []
    used = 0

    def charge(body: str) -> int:
        text = SECTION_SEPARATOR + body if parts else body
        return estimator.estimate(text, options.model_id)

    def take(name: str, body: str, cost: int) -> None:
        nonlocal used
        parts.append(body)
        selection.included.append(name)
        used += cost

    if intro is not None and INTRO_ALWAYS_INCLUDED:
        intro_cost = charge(intro.body)
        take(intro.name, intro.body, intro_cost)
        log.debug(f"Including {intro.name} ({intro_cost} tokens)")
        if intro_cost > max_tokens:
            log.warning(
                f"{intro.name} alone needs {intro_cost} tokens, over the {max_tokens} budget"
            )

    included = 0
    for section in order_sections(sections):
        if included >= options.max_sections:
            break

        cost = charge(section.body)
        if used + cost <= max_tokens:
            take(section.name, section.body, cost)
            included += 1
            log.debug(
                f"Including {section.name} with priority {section.priority:.2f} ({cost} tokens)"
            )
            continue

        if options.prefer_complete:
            log.debug(f"Skipping {section.name}: {cost} tokens do not fit")
            continue

        remaining = max_tokens - used
        if parts:
            remaining -= estimator.estimate(SECTION_SEPARATOR, options.model_id)
        fragment = trim_to_budget(
            section.body,
            remaining,
            TrimOptions(
                preserve_start=True,
                add_ellipsis=True,
                model_id=options.model_id,
                insert_message=trimmed_section_marker(section.name),
            ),
            estimator=estimator,
            logger=log,
        )
        if fragment:
            take(section.name, fragment, charge(fragment))
            selection.trimmed = section.name
            log.debug(f"Trimmed {section.name} to fit the remaining {remaining} tokens")
        if STOP_AFTER_FORCED_TRIM:
            break

    selection.content = SECTION_SEPARATOR.join(parts)
    selection.tokens_used = used
    return selection
