"""Line-window extraction for corpora without recognizable sections.

Each line is scored against the query keywords, runs of matching lines are
merged into windows padded with surrounding context, and the best windows are
packed into the budget with the same greedy selector used for sections.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from itertools import accumulate

from repofit.context.models import LineWindow, ScoredLine, Section, Selection
from repofit.context.selector import SelectionOptions, select_sections
from repofit.log import SupportsLogging, get_logger
from repofit.tokens.estimator import TokenEstimator

SUBSTRING_HIT = 1.0
WORD_BOUNDARY_BONUS = 0.5


def score_lines(lines: Sequence[str], keywords: Sequence[str]) -> list[ScoredLine]:
    """Score each line by keyword hits, with extra credit for whole-word hits."""
    boundaries = [
        (kw.lower(), re.compile(rf"\b{re.escape(kw)}\b", re.IGNORECASE))
        for kw in keywords
        if kw
    ]
    scored = []
    for index, line in enumerate(lines):
        lower = line.lower()
        score = 0.0
        for keyword, boundary in boundaries:
            if keyword in lower:
                score += SUBSTRING_HIT
                if boundary.search(line):
                    score += WORD_BOUNDARY_BONUS
        scored.append(ScoredLine(index=index, text=line, score=score))
    return scored


def build_windows(scored: Sequence[ScoredLine], context_size: int) -> list[LineWindow]:
    """Merge matching lines into context-padded, non-overlapping windows.

    A window opens at the first matching line and stays open while the gap
    since the last match is at most `context_size` lines. Windows are then
    padded by `context_size` on both sides (clamped to the corpus) and any
    that overlap or touch are coalesced, summing their scores.
    """
    if not scored:
        return []
    context_size = max(0, context_size)
    last_index = len(scored) - 1

    runs: list[LineWindow] = []
    start: int | None = None
    last_match = 0
    total = 0.0

    for line in scored:
        if line.score > 0:
            if start is None:
                start = line.index
                total = 0.0
            last_match = line.index
            total += line.score
        elif start is not None and line.index - last_match > context_size:
            runs.append(LineWindow(start, last_match, total))
            start = None
    if start is not None:
        runs.append(LineWindow(start, last_match, total))

    merged: list[LineWindow] = []
    for run in runs:
        padded = LineWindow(
            max(0, run.start_line - context_size),
            min(last_index, run.end_line + context_size),
            run.score,
        )
        if merged and padded.start_line <= merged[-1].end_line + 1:
            prev = merged[-1]
            merged[-1] = LineWindow(
                prev.start_line,
                max(prev.end_line, padded.end_line),
                prev.score + padded.score,
            )
        else:
            merged.append(padded)
    return merged


def extract_line_windows(
    corpus: str,
    keywords: Sequence[str],
    max_tokens: int,
    context_size: int = 5,
    model_id: str | None = None,
    estimator: TokenEstimator | None = None,
    logger: SupportsLogging | None = None,
) -> Selection | None:
    """Pack the best keyword windows of an unstructured corpus into the budget.

    Returns None when no line matches any keyword.
    """
    log = get_logger(logger, __name__)
    lines = corpus.split("\n")
    windows = build_windows(score_lines(lines, keywords), context_size)
    if not windows:
        log.info("No keyword matches found in any line")
        return None

    offsets = [0, *accumulate(len(line) + 1 for line in lines)]

    # Scores become priorities; the selector's stable sort keeps earlier
    # windows first among equals.
    sections = [
        Section(
            name=w.name,
            body="\n".join(lines[w.start_line:w.end_line + 1]),
            start=offsets[w.start_line],
            score=w.score,
            priority=w.score,
        )
        for w in windows
    ]
    selection = select_sections(
        sections,
        max_tokens,
        options=SelectionOptions(
            max_sections=len(sections),
            prefer_complete=False,
            model_id=model_id,
        ),
        estimator=estimator,
        logger=log,
    )
    log.info(
        f"Fallback extraction selected {len(selection.included)} of {len(windows)} "
        f"windows totaling {selection.tokens_used} tokens"
    )
    return selection
