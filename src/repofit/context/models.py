"""Data models for budgeted content selection."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import BaseModel, Field

INTRO_SECTION_NAME = "Repository Introduction"


class Framing(str, Enum):
    """How sections are delimited in a corpus."""

    TAG = "tag"  # <file path="...">...</file>
    HEADER = "header"  # "File: <path>" followed by a ----/==== rule


class Strategy(str, Enum):
    """Which path produced an extraction result."""

    PASSTHROUGH = "passthrough"  # returned unchanged
    SECTIONS = "sections"
    LINE_WINDOWS = "line_windows"
    TRIM = "trim"


@dataclass(frozen=True)
class Section:
    """A named, contiguous span of the corpus (usually one file).

    `body` is never altered once split; scoring produces a new value.
    """

    name: str
    body: str
    start: int = 0  # offset of body within the corpus
    score: float = 0.0  # keyword relevance
    static_priority: float = 0.0  # filename heuristics
    priority: float = 0.0  # ordering key: score + static_priority
    is_intro: bool = False

    def with_scores(self, score: float, static_priority: float = 0.0) -> Section:
        return replace(
            self,
            score=score,
            static_priority=static_priority,
            priority=score + static_priority,
        )


@dataclass(frozen=True)
class SplitResult:
    """Sections found in a corpus, in corpus order."""

    sections: list[Section] = field(default_factory=list)
    intro: Section | None = None
    framing: Framing | None = None

    @property
    def is_structured(self) -> bool:
        return bool(self.sections)


@dataclass(frozen=True)
class ScoredLine:
    index: int
    text: str
    score: float


@dataclass(frozen=True)
class LineWindow:
    """Inclusive, 0-based line range merged from scored lines plus context."""

    start_line: int
    end_line: int
    score: float

    @property
    def name(self) -> str:
        return f"lines {self.start_line + 1}-{self.end_line + 1}"


@dataclass
class Selection:
    """Outcome of greedy packing."""

    content: str = ""
    included: list[str] = field(default_factory=list)
    tokens_used: int = 0
    trimmed: str | None = None  # name of the section cut to fit, if any


class ExtractionReport(BaseModel):
    """Reduced content plus token accounting for one extraction call."""

    content: str
    strategy: Strategy
    original_tokens: int = 0
    result_tokens: int = 0
    token_budget: int = 0
    keywords: list[str] = Field(default_factory=list)
    sections_available: int = 0
    sections_included: list[str] = Field(default_factory=list)
    trimmed_section: str | None = None

    @property
    def within_budget(self) -> bool:
        return self.result_tokens <= self.token_budget

    def summary(self) -> str:
        """Human-readable summary of what was kept."""
        lines = [
            f"Strategy: {self.strategy.value}",
            f"Tokens: {self.original_tokens:,} -> {self.result_tokens:,} "
            f"(budget {self.token_budget:,})",
        ]
        if self.keywords:
            lines.append(f"Keywords: {', '.join(self.keywords)}")
        if self.sections_available:
            lines.append(
                f"Sections: {len(self.sections_included)} of {self.sections_available} kept"
            )
        for name in self.sections_included:
            marker = "~" if name == self.trimmed_section else ">"
            lines.append(f"  {marker} {name}")
        return "\n".join(lines)
