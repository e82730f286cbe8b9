"""Tests for keyword extraction and relevance scoring."""

from __future__ import annotations

import pytest

from repofit.config import PriorityRules, ScoringWeights
from repofit.search.keywords import extract_keywords
from repofit.search.scorer import is_manifest, relevance_score, static_priority


class TestExtractKeywords:
    def test_question_words_dropped(self):
        assert extract_keywords("how does parseConfig work") == ["parseconfig"]

    def test_common_terms_filtered(self):
        keywords = extract_keywords("fix the database connection bug in UserService")
        assert "userservice" in keywords
        assert "database" not in keywords
        assert "connection" not in keywords

    def test_common_terms_kept_when_disabled(self):
        keywords = extract_keywords("database connection", filter_common_terms=False)
        assert keywords == ["database", "connection"]

    def test_frequency_order(self):
        assert extract_keywords("alpha beta beta gamma") == ["beta", "alpha", "gamma"]

    def test_stem_folding(self):
        assert extract_keywords("rendering rendered renderer") == ["rendering", "renderer"]

    def test_plural_folding(self):
        assert extract_keywords("widget widgets") == ["widget"]

    def test_quoted_phrases_appended(self):
        keywords = extract_keywords('find "session expiry" handling')
        assert keywords == ["expiry", "handling", "session expiry"]

    def test_code_like_fragments_removed(self):
        assert extract_keywords("look at utils.py and src/main") == ["look"]

    def test_min_word_length(self):
        assert extract_keywords("go to db") == []
        assert extract_keywords("go to db", min_word_length=2) == ["go", "to", "db"]

    def test_max_keywords(self):
        query = " ".join(f"term{chr(97 + i)}" for i in range(20))
        assert len(extract_keywords(query, max_keywords=5)) == 5

    def test_lowercase_and_unique(self):
        keywords = extract_keywords("Scheduler SCHEDULER scheduler Backoff")
        assert keywords == ["scheduler", "backoff"]

    @pytest.mark.parametrize("query", ["", "   ", "the and for"])
    def test_no_keywords(self, query: str):
        assert extract_keywords(query) == []

    def test_deterministic(self):
        query = "retry backoff jitter scheduler retry queue"
        assert extract_keywords(query) == extract_keywords(query)


class TestRelevanceScore:
    def test_path_match(self):
        assert relevance_score("src/parser.py", "", ["parser"]) == 3.0

    def test_path_case_insensitive(self):
        assert relevance_score("src/ParseConfig.ts", "", ["parseconfig"]) == 3.0

    def test_content_occurrences(self):
        assert relevance_score("a.py", "foo bar FOO baz Foo", ["foo"]) == 6.0

    def test_no_match(self):
        assert relevance_score("a.py", "nothing here", ["parseconfig"]) == 0.0
        assert relevance_score("a.py", "anything", []) == 0.0

    def test_keyword_is_literal(self):
        assert relevance_score("a.cpp", "c++ and c++", ["c++"]) == 4.0
        assert relevance_score("a.py", "a.b", ["a.b"]) == 2.0
        assert relevance_score("a.py", "axb", ["a.b"]) == 0.0

    def test_proximity_bonus(self):
        weights = ScoringWeights()
        score = relevance_score("a.py", "alpha beta", ["alpha", "beta"], weights)
        assert score == 2.0 + 2.0 + weights.proximity_score

    def test_proximity_disabled(self):
        weights = ScoringWeights(proximity_bonus=False)
        assert relevance_score("a.py", "alpha beta", ["alpha", "beta"], weights) == 4.0

    def test_proximity_far_apart(self):
        body = "alpha" + " " * 500 + "beta"
        assert relevance_score("a.py", body, ["alpha", "beta"]) == 4.0

    def test_proximity_applied_once(self):
        weights = ScoringWeights()
        body = "alpha beta gamma"
        score = relevance_score("a.py", body, ["alpha", "beta", "gamma"], weights)
        assert score == 6.0 + weights.proximity_score

    def test_custom_weights(self):
        weights = ScoringWeights(content_weight=1.0, path_weight=10.0, proximity_bonus=False)
        assert relevance_score("src/auth.py", "auth auth", ["auth"], weights) == 12.0

    def test_non_negative(self):
        assert relevance_score("", "", ["x"]) >= 0


class TestStaticPriority:
    @pytest.mark.parametrize(
        "name",
        ["package.json", "app/tsconfig.json", "README.md", "docs/README", "web/src/index.ts",
         "pyproject.toml", "webpack.config.js"],
    )
    def test_manifest_boost(self, name: str):
        assert is_manifest(name, PriorityRules())
        assert static_priority(name, "small") == 20.0

    def test_ordinary_file(self):
        assert static_priority("src/utils.ts", "small") == 0.0

    def test_include_list(self):
        assert static_priority("src/auth/login.ts", "x", include=["auth", "login"]) == 20.0

    def test_exclude_list(self):
        assert static_priority("tests/login.test.ts", "x", exclude=["test"]) == -10.0

    def test_large_file_penalty(self):
        body = "line\n" * 250
        assert static_priority("src/big.ts", body) == -5.0

    def test_threshold_is_exclusive(self):
        body = "\n".join(["line"] * 200)
        assert static_priority("src/ok.ts", body) == 0.0

    def test_adjustments_are_additive(self):
        body = "line\n" * 250
        priority = static_priority("src/README.md", body, include=["src"], exclude=["md"])
        assert priority == 20.0 + 10.0 - 10.0 - 5.0

    def test_custom_rules(self):
        rules = PriorityRules(manifest_boost=1.0, include_boost=2.0, manifest_suffixes=["BUILD"])
        assert static_priority("pkg/BUILD", "", rules, include=["pkg"]) == 3.0
