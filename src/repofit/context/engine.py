"""Relevance-ranked content selection under a token budget.

Pipeline for ``extract``:
  1. Estimate the corpus; if it already fits, return it unchanged.
  2. Treat queries shorter than ``min_query_length`` as no query.
  3. Extract keywords; none means no signal, return unchanged.
  4. Split into sections (tag framing, then header framing).
  5a. Sections found: score relevance + static priority, drop sections with
      neither a keyword hit nor a positive static boost, greedily pack with
      the introduction first.
  5b. No sections: score individual lines, merge into context windows, pack
      the best windows. No matching line means return unchanged.

``smart_trim`` is the query-free variant: sections are ordered by static
priority alone, and unstructured text falls back to plain head/tail trimming.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from repofit.config import EngineConfig
from repofit.context.fallback import extract_line_windows
from repofit.context.models import ExtractionReport, Section, Selection, Strategy
from repofit.context.selector import SelectionOptions, select_sections
from repofit.context.splitter import split_sections
from repofit.log import SupportsLogging, get_logger
from repofit.search.keywords import extract_keywords
from repofit.search.scorer import relevance_score, static_priority
from repofit.tokens.estimator import TokenEstimator
from repofit.tokens.trimmer import TrimOptions, trim_to_budget

KeywordExtractor = Callable[[str], Sequence[str]]


class ContentExtractor:
    """Reduces packaged repository text to fit a token budget.

    Usage:
        extractor = ContentExtractor()
        report = extractor.extract(corpus, "how does parseConfig work", 8000)
        print(report.summary())
        prompt_context = report.content
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        keyword_extractor: KeywordExtractor | None = None,
        logger: SupportsLogging | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.estimator = TokenEstimator(self.config.tokens)
        self.keyword_extractor = keyword_extractor or self._default_keywords
        self.log = get_logger(logger, __name__)

    def _default_keywords(self, query: str) -> list[str]:
        kw = self.config.keywords
        return extract_keywords(
            query,
            min_word_length=kw.min_word_length,
            max_keywords=kw.max_keywords,
            filter_common_terms=kw.filter_common_terms,
            logger=self.log,
        )

    def keywords_for(self, query: str) -> list[str]:
        """Lower-cased, de-duplicated, capped keywords for `query`."""
        keywords: list[str] = []
        for term in self.keyword_extractor(query):
            term = term.lower()
            if term and term not in keywords:
                keywords.append(term)
        return keywords[: self.config.keywords.max_keywords]

    # -------------------------------------------------------------------
    # Main entry points
    # -------------------------------------------------------------------

    def extract(
        self,
        corpus: str,
        query: str,
        max_tokens: int | None = None,
        model_id: str | None = None,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> ExtractionReport:
        """Keep the parts of `corpus` most relevant to `query` within budget."""
        budget = self.config.selection.default_max_tokens if max_tokens is None else max_tokens
        original = self.estimator.estimate(corpus, model_id)

        def passthrough(keywords: list[str] | None = None) -> ExtractionReport:
            return ExtractionReport(
                content=corpus,
                strategy=Strategy.PASSTHROUGH,
                original_tokens=original,
                result_tokens=original,
                token_budget=budget,
                keywords=keywords or [],
            )

        if original <= budget:
            self.log.debug(f"Content already within budget ({original} <= {budget} tokens)")
            return passthrough()

        if not query or len(query.strip()) < self.config.selection.min_query_length:
            self.log.info("Query too short for relevance extraction, returning full content")
            return passthrough()

        keywords = self.keywords_for(query)
        if not keywords:
            self.log.info("No significant keywords extracted from query, returning full content")
            return passthrough()

        self.log.info(
            f"Extracting relevant content from {original} tokens to {budget} tokens "
            f"using {len(keywords)} keywords: {', '.join(keywords)}"
        )

        split = split_sections(corpus, rules=self.config.priority)
        if split.is_structured:
            ranked = self.prioritize(split.sections, keywords, include, exclude)
            candidates = [s for s in ranked if _is_candidate(s)]
            if not candidates:
                self.log.info("No section matched the query, returning full content")
                return passthrough(keywords)
            selection = select_sections(
                candidates,
                budget,
                intro=split.intro,
                options=SelectionOptions(
                    max_sections=self.config.selection.max_sections,
                    prefer_complete=self.config.selection.prefer_complete,
                    model_id=model_id,
                ),
                estimator=self.estimator,
                logger=self.log,
            )
            return self._report(
                selection, Strategy.SECTIONS, original, budget, model_id,
                keywords=keywords, available=len(split.sections),
            )

        self.log.warning("No file sections found in content, falling back to line-based analysis")
        selection = extract_line_windows(
            corpus,
            keywords,
            budget,
            context_size=self.config.selection.context_size,
            model_id=model_id,
            estimator=self.estimator,
            logger=self.log,
        )
        if selection is None:
            return passthrough(keywords)
        return self._report(
            selection, Strategy.LINE_WINDOWS, original, budget, model_id, keywords=keywords,
        )

    def smart_trim(
        self,
        corpus: str,
        max_tokens: int,
        model_id: str | None = None,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        prefer_complete: bool | None = None,
    ) -> ExtractionReport:
        """Fit `corpus` into `max_tokens` using static file priorities only."""
        original = self.estimator.estimate(corpus, model_id)
        if original <= max_tokens:
            return ExtractionReport(
                content=corpus,
                strategy=Strategy.PASSTHROUGH,
                original_tokens=original,
                result_tokens=original,
                token_budget=max_tokens,
            )

        self.log.info(f"Smart trimming repository content from {original} tokens to {max_tokens} tokens")

        split = split_sections(corpus, rules=self.config.priority)
        if not split.is_structured:
            content = trim_to_budget(
                corpus,
                max_tokens,
                TrimOptions(model_id=model_id),
                estimator=self.estimator,
                logger=self.log,
            )
            result_tokens = self.estimator.estimate(content, model_id)
            self.log.info(f"Smart trimming completed: {original} tokens -> ~{result_tokens} tokens")
            return ExtractionReport(
                content=content,
                strategy=Strategy.TRIM,
                original_tokens=original,
                result_tokens=result_tokens,
                token_budget=max_tokens,
            )

        ranked = self.prioritize(split.sections, (), include, exclude)
        if prefer_complete is None:
            prefer_complete = self.config.selection.prefer_complete
        selection = select_sections(
            ranked,
            max_tokens,
            intro=split.intro,
            options=SelectionOptions(
                max_sections=len(ranked),
                prefer_complete=prefer_complete,
                model_id=model_id,
            ),
            estimator=self.estimator,
            logger=self.log,
        )
        return self._report(
            selection, Strategy.SECTIONS, original, max_tokens, model_id,
            available=len(split.sections),
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    def prioritize(
        self,
        sections: Sequence[Section],
        keywords: Sequence[str],
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> list[Section]:
        """Attach relevance and static priority to each section."""
        include = list(include or ())
        exclude = list(exclude or ())
        return [
            section.with_scores(
                relevance_score(section.name, section.body, keywords, self.config.scoring),
                static_priority(
                    section.name, section.body, self.config.priority, include, exclude
                ),
            )
            for section in sections
        ]

    def _report(
        self,
        selection: Selection,
        strategy: Strategy,
        original: int,
        budget: int,
        model_id: str | None,
        keywords: list[str] | None = None,
        available: int = 0,
    ) -> ExtractionReport:
        result_tokens = self.estimator.estimate(selection.content, model_id)
        self.log.info(
            f"Selected {len(selection.included)} sections: {original} tokens -> "
            f"~{result_tokens} tokens (budget {budget})"
        )
        return ExtractionReport(
            content=selection.content,
            strategy=strategy,
            original_tokens=original,
            result_tokens=result_tokens,
            token_budget=budget,
            keywords=keywords or [],
            sections_available=available,
            sections_included=selection.included,
            trimmed_section=selection.trimmed,
        )


def _is_candidate(section: Section) -> bool:
    """Keyword hits keep a section even when penalties push its priority negative."""
    return section.score > 0 or section.static_priority > 0


def extract_relevant_content(
    corpus: str,
    query: str,
    max_tokens: int | None = None,
    model_id: str | None = None,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    config: EngineConfig | None = None,
    logger: SupportsLogging | None = None,
) -> str:
    """Reduce `corpus` to the content most relevant to `query` within budget."""
    extractor = ContentExtractor(config, logger=logger)
    return extractor.extract(corpus, query, max_tokens, model_id, include, exclude).content


def extract_relevant(
    corpus: str,
    query: str,
    max_tokens: int | None = None,
    model_id: str | None = None,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    config: EngineConfig | None = None,
    logger: SupportsLogging | None = None,
) -> ExtractionReport:
    extractor = ContentExtractor(config, logger=logger)
    return extractor.extract(corpus, query, max_tokens, model_id, include, exclude)


def smart_trim(
    corpus: str,
    max_tokens: int,
    model_id: str | None = None,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    prefer_complete: bool | None = None,
    config: EngineConfig | None = None,
    logger: SupportsLogging | None = None,
) -> str:
    """Trim a repository dump to `max_tokens` keeping its most important files."""
    extractor = ContentExtractor(config, logger=logger)
    return extractor.smart_trim(
        corpus, max_tokens, model_id, include, exclude, prefer_complete
    ).content
