#!/usr/bin/env python3
"""Demo: Using repofit as a Python library.

This shows how to fit a packaged repository dump into a model's context
window programmatically, not just through the CLI.
"""

import sys
from pathlib import Path

from repofit import estimate_tokens, trim_to_budget
from repofit.context import ContentExtractor


def main():
    dump = Path(sys.argv[1] if len(sys.argv) > 1 else "repo-dump.xml")
    corpus = dump.read_text(encoding="utf-8")
    model = "gemini-1.5-pro"

    # 1. How big is it?
    print(f"Corpus: {len(corpus):,} chars, ~{estimate_tokens(corpus, model):,} tokens")

    # 2. Keep what matters for a question
    extractor = ContentExtractor()
    report = extractor.extract(corpus, "how does parseConfig work", max_tokens=30_000, model_id=model)
    print()
    print(report.summary())

    # 3. No question? Keep the most important files
    trimmed = extractor.smart_trim(corpus, 30_000, model, include=["src/"], exclude=["test"])
    print()
    print(trimmed.summary())

    # 4. Plain text with no structure: keep the head and the tail
    notes = trim_to_budget(corpus, 500)
    print()
    print(f"Head/tail trim: {len(notes):,} chars")


if __name__ == "__main__":
    main()
