"""Split a packaged repository dump into named sections.

Two framings are recognized:

    File: src/app.py
    ================
    ...body...

and

    <file path="src/app.py">...body...</file>

Matches are collected with a single forward scan so the splitter holds no
cursor state between calls.
"""

from __future__ import annotations

import re

from repofit.config import PriorityRules
from repofit.context.models import INTRO_SECTION_NAME, Framing, Section, SplitResult

_HEADER_RE = re.compile(r"^File: (.+?)\r?\n[-=]+\r?\n", re.MULTILINE)
_TAG_RE = re.compile(r'<file\b[^>]*?\bpath="([^"]+)"[^>]*>.*?</file>', re.DOTALL)

# Tried in this order when no framing is requested
_DETECTION_ORDER = (Framing.TAG, Framing.HEADER)


def _split_headers(corpus: str) -> list[Section]:
    matches = list(_HEADER_RE.finditer(corpus))
    sections = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(corpus)
        sections.append(
            Section(name=match.group(1).strip(), body=corpus[match.start():end], start=match.start())
        )
    return sections


def _split_tags(corpus: str) -> list[Section]:
    return [
        Section(name=match.group(1), body=match.group(0), start=match.start())
        for match in _TAG_RE.finditer(corpus)
    ]


_SPLITTERS = {
    Framing.HEADER: _split_headers,
    Framing.TAG: _split_tags,
}


def split_sections(
    corpus: str,
    framing: Framing | None = None,
    rules: PriorityRules | None = None,
) -> SplitResult:
    """Partition `corpus` into sections.

    Args:
        corpus: Packaged repository text.
        framing: Force one convention; by default tag framing is tried first,
            then header framing.
        rules: Supplies the priority given to the introduction section.

    Returns:
        A SplitResult. When nothing matched, `sections` is empty and `framing`
        is None: the corpus is unstructured.
    """
    rules = rules or PriorityRules()
    candidates = (framing,) if framing else _DETECTION_ORDER

    for kind in candidates:
        sections = _SPLITTERS[kind](corpus)
        if sections:
            return SplitResult(
                sections=sections,
                intro=_intro(corpus, sections[0].start, rules),
                framing=kind,
            )

    return SplitResult()


def _intro(corpus: str, first_start: int, rules: PriorityRules) -> Section | None:
    """Text before the first section, usually a summary and directory tree."""
    text = corpus[:first_start]
    if not text.strip():
        return None
    return Section(
        name=INTRO_SECTION_NAME,
        body=text,
        start=0,
        priority=rules.intro_priority,
        static_priority=rules.intro_priority,
        is_intro=True,
    )
