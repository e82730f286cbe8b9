"""Keyword relevance scoring and static priority rules for sections.

Two independent signals make up a section's final priority:

- ``relevance_score``: how strongly the query keywords appear in the section
  name and body (path hits, content hits, and a co-occurrence bonus).
- ``static_priority``: filename heuristics that do not depend on the query
  (manifest/readme boosts, caller include/exclude lists, large-file penalty).

Priority is their sum; both are kept on the section so each can be inspected.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from repofit.config import PriorityRules, ScoringWeights


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(re.escape(keyword), re.IGNORECASE)


def _positions(pattern: re.Pattern[str], text: str) -> list[int]:
    return [m.start() for m in pattern.finditer(text)]


def _min_distance(a: list[int], b: list[int]) -> int:
    """Smallest gap between two non-empty sorted position lists."""
    i = j = 0
    best = abs(a[0] - b[0])
    while i < len(a) and j < len(b):
        best = min(best, abs(a[i] - b[j]))
        if a[i] < b[j]:
            i += 1
        else:
            j += 1
    return best


def relevance_score(
    name: str,
    body: str,
    keywords: Sequence[str],
    weights: ScoringWeights | None = None,
) -> float:
    """Score how relevant a section is to a set of query keywords.

    Args:
        name: Section name (usually the file path).
        body: Section text.
        keywords: Lower-cased query terms.
        weights: Path/content weights and proximity settings.

    Returns:
        A non-negative score; 0 means no keyword appears anywhere.
    """
    weights = weights or ScoringWeights()
    if not keywords:
        return 0.0

    name_lower = name.lower()
    score = 0.0
    positions: dict[str, list[int]] = {}

    for keyword in keywords:
        if not keyword:
            continue
        if keyword.lower() in name_lower:
            score += weights.path_weight

        hits = _positions(_keyword_pattern(keyword), body) if body else []
        if hits:
            score += weights.content_weight * len(hits)
            positions[keyword] = hits

    if weights.proximity_bonus and len(positions) > 1:
        found = list(positions)
        for i, a in enumerate(found):
            if any(
                _min_distance(positions[a], positions[b]) <= weights.proximity_window
                for b in found[i + 1:]
            ):
                score += weights.proximity_score
                break

    return score


def is_manifest(name: str, rules: PriorityRules) -> bool:
    """Manifest, config, readme, or entry-point file."""
    return any(name.endswith(s) for s in rules.manifest_suffixes) or any(
        f in name for f in rules.manifest_fragments
    )


def static_priority(
    name: str,
    body: str,
    rules: PriorityRules | None = None,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> float:
    """Query-independent priority adjustment for a section."""
    rules = rules or PriorityRules()
    priority = 0.0

    for element in include or ():
        if element and element in name:
            priority += rules.include_boost

    if is_manifest(name, rules):
        priority += rules.manifest_boost

    for element in exclude or ():
        if element and element in name:
            priority -= rules.exclude_penalty

    if body.count("\n") + 1 > rules.large_file_lines:
        priority -= rules.large_file_penalty

    return priority
