"""Tests for greedy section selection."""

from __future__ import annotations

from repofit.context.models import INTRO_SECTION_NAME, Section
from repofit.context.selector import (
    SECTION_SEPARATOR,
    SelectionOptions,
    order_sections,
    select_sections,
)
from repofit.context.splitter import split_sections
from repofit.tokens.estimator import estimate_tokens


def _section(name: str, body: str, priority: float) -> Section:
    return Section(name=name, body=body).with_scores(priority)


def _intro(body: str) -> Section:
    return Section(
        name=INTRO_SECTION_NAME, body=body, priority=100.0, static_priority=100.0, is_intro=True
    )


class TestOrdering:
    def test_priority_descending(self):
        sections = [_section("a", "", 1), _section("b", "", 5), _section("c", "", 3)]
        assert [s.name for s in order_sections(sections)] == ["b", "c", "a"]

    def test_ties_keep_corpus_order(self):
        sections = [_section(n, "", 2) for n in ("x", "y", "z")]
        assert [s.name for s in order_sections(sections)] == ["x", "y", "z"]


class TestSelectSections:
    def test_all_fit(self):
        sections = [_section("a", "alpha", 1), _section("b", "beta", 5), _section("c", "gamma", 5)]
        selection = select_sections(sections, 1000)
        assert selection.included == ["b", "c", "a"]
        assert selection.content == SECTION_SEPARATOR.join(["beta", "gamma", "alpha"])
        assert selection.trimmed is None

    def test_intro_first(self):
        intro = _intro("Directory Structure\nsrc/\n")
        sections = [_section("a", "alpha", 50)]
        selection = select_sections(sections, 1000, intro=intro)
        assert selection.included == [INTRO_SECTION_NAME, "a"]
        assert selection.content == intro.body + SECTION_SEPARATOR + "alpha"

    def test_intro_over_budget_kept_alone(self):
        intro = _intro("x" * 400)
        sections = [_section("a", "y" * 40, 10)]
        selection = select_sections(sections, 10, intro=intro)
        assert selection.content == intro.body
        assert selection.included == [INTRO_SECTION_NAME]
        assert selection.tokens_used > 10

    def test_prefer_complete_skips(self):
        sections = [_section("big", "b" * 4000, 10), _section("small", "s" * 40, 1)]
        selection = select_sections(sections, 50, options=SelectionOptions(prefer_complete=True))
        assert selection.included == ["small"]
        assert selection.content == "s" * 40
        assert selection.trimmed is None

    def test_forced_trim_stops_selection(self):
        sections = [_section("big", "b" * 4000, 10), _section("small", "s" * 40, 1)]
        selection = select_sections(sections, 50)
        assert selection.included == ["big"]
        assert selection.trimmed == "big"
        assert selection.content.startswith("b")
        assert selection.content.endswith("...")
        assert "s" not in selection.content
        assert estimate_tokens(selection.content) <= 50

    def test_trimmed_fragment_after_whole_section(self):
        sections = [_section("small", "s" * 40, 10), _section("big", "b" * 4000, 1)]
        selection = select_sections(sections, 80)
        assert selection.included == ["small", "big"]
        assert selection.content.startswith("s" * 40 + SECTION_SEPARATOR + "b")
        assert estimate_tokens(selection.content) <= 80

    def test_max_sections(self):
        sections = [_section(f"s{i}", f"body {i}", 1) for i in range(5)]
        selection = select_sections(sections, 1000, options=SelectionOptions(max_sections=2))
        assert selection.included == ["s0", "s1"]

    def test_intro_not_counted_toward_max_sections(self):
        sections = [_section(f"s{i}", f"body {i}", 1) for i in range(5)]
        selection = select_sections(
            sections, 1000, intro=_intro("intro"), options=SelectionOptions(max_sections=2)
        )
        assert selection.included == [INTRO_SECTION_NAME, "s0", "s1"]

    def test_empty(self):
        selection = select_sections([], 100)
        assert selection.content == ""
        assert selection.included == []
        assert selection.tokens_used == 0

    def test_tokens_used_matches_content(self):
        sections = [_section("a", "a" * 123, 3), _section("b", "b" * 77, 2)]
        selection = select_sections(sections, 1000)
        assert estimate_tokens(selection.content) <= selection.tokens_used

    def test_budget_respected(self, tagged_dump: str):
        split = split_sections(tagged_dump)
        ranked = [s.with_scores(float(len(split.sections) - i)) for i, s in enumerate(split.sections)]
        for budget in range(1, 1200, 23):
            selection = select_sections(ranked, budget)
            assert estimate_tokens(selection.content) <= budget

    def test_model_specific_budget(self, header_dump: str):
        split = split_sections(header_dump)
        ranked = [s.with_scores(1.0) for s in split.sections]
        options = SelectionOptions(model_id="gemini-2.5-pro")
        for budget in (40, 150, 400):
            selection = select_sections(ranked, budget, options=options)
            assert estimate_tokens(selection.content, "gemini-2.5-pro") <= budget
