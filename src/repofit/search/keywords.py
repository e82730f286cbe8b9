"""Query keyword extraction for relevance filtering.

Turns a natural language question into an ordered, de-duplicated list of
lower-cased search terms. Code-like fragments (calls, paths, URLs) are
stripped, generic programming vocabulary is dropped, and words that share a
crude stem are folded together so "parsing" and "parsed" count as one term.
"""

from __future__ import annotations

import re
from collections import Counter

from repofit.log import SupportsLogging, get_logger

# Generic programming vocabulary that matches almost every file
COMMON_PROGRAMMING_TERMS: frozenset[str] = frozenset({
    # General
    "function", "class", "variable", "method", "interface", "type", "module",
    "import", "export", "return", "public", "private", "protected", "static",
    "const", "let", "var", "void", "null", "undefined", "object", "array",
    "string", "number", "boolean", "true", "false", "async", "await", "promise",
    "try", "catch", "finally", "throw", "error", "exception", "event", "callback",
    # Data structures
    "list", "map", "set", "dictionary", "tree", "graph", "queue", "stack",
    # Operations
    "add", "remove", "delete", "update", "get", "create", "init", "start",
    "stop", "pause", "resume", "load", "save", "read", "write", "open", "close",
    # Concepts
    "algorithm", "api", "bug", "cache", "code", "compiler", "debug", "feature",
    "framework", "implementation", "library", "package", "pattern", "performance",
    "programming", "reference", "software", "solution", "source", "syntax", "system",
    # File types
    "file", "folder", "directory", "path", "extension", "json", "xml", "html",
    "css", "js", "ts", "py", "java", "c", "cpp", "md", "txt",
    # UI
    "button", "input", "form", "field", "label", "select", "option", "checkbox",
    "radio", "dropdown", "menu", "navigation", "sidebar", "header", "footer", "modal",
    # Database
    "database", "table", "column", "row", "query", "schema", "index",
    "record", "primary", "foreign", "key", "value", "relation",
    # Web
    "http", "https", "url", "uri", "request", "response", "client", "server",
    "browser", "cookie", "session", "token", "body", "param", "endpoint",
    # Networking
    "network", "socket", "protocol", "ip", "tcp", "udp", "dns", "port", "host",
    "domain", "ssl", "tls", "connection", "packet", "firewall", "proxy",
})

# Question words and fillers
STOP_WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "that", "this", "with", "from", "have", "been",
    "will", "can", "should", "would", "could", "into", "when", "where",
    "how", "what", "why", "which", "there", "their", "about", "also",
    "just", "more", "some", "than", "them", "then", "these", "very",
    "after", "before", "between", "each", "other", "such", "only",
    "does", "did", "doing", "work", "works", "working", "are", "was", "were",
    "has", "had", "not", "but", "you", "your", "our", "all", "any", "who",
    "its", "use", "used", "using", "make", "like", "show", "explain", "find",
})

_CODE_LIKE = [
    re.compile(r"`[^`]+`"),  # backtick code
    re.compile(r"\([^)]*\)"),
    re.compile(r"\[[^\]]*\]"),
    re.compile(r"\{[^}]*\}"),
    re.compile(r"https?://\S+"),
    re.compile(r"[a-z0-9_-]+\.[a-z0-9_-]+"),  # file.ext
    re.compile(r"[a-z0-9_-]+/[a-z0-9_-]+"),  # dir/file
]

_QUOTED_PHRASE = re.compile(r'"([^"]+)"')


def _stem(word: str) -> str:
    if word.endswith("ing"):
        return word[:-3]
    if word.endswith("ed"):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def extract_keywords(
    query: str,
    min_word_length: int = 3,
    max_keywords: int = 15,
    filter_common_terms: bool = True,
    logger: SupportsLogging | None = None,
) -> list[str]:
    """Extract search keywords from a query string.

    Args:
        query: Natural language query.
        min_word_length: Shorter words are ignored.
        max_keywords: Cap on the number of returned terms.
        filter_common_terms: Drop generic programming vocabulary.

    Returns:
        Lower-cased, de-duplicated terms, most frequent first (ties keep
        query order), followed by any double-quoted phrases.
    """
    log = get_logger(logger, __name__)
    if not query or max_keywords <= 0:
        return []

    cleaned = query.lower()
    for pattern in _CODE_LIKE:
        cleaned = pattern.sub("", cleaned)

    words = [
        w for w in re.sub(r"[^\w\s]", " ", cleaned).split()
        if len(w) >= min_word_length
    ]
    if filter_common_terms:
        words = [
            w for w in words
            if w not in COMMON_PROGRAMMING_TERMS and w not in STOP_WORDS
        ]

    counts = Counter(words)

    # Fold words sharing a stem; the most frequent spelling represents the
    # group and carries the group's total count.
    groups: dict[str, list[str]] = {}
    for word in counts:
        groups.setdefault(_stem(word), []).append(word)

    folded: dict[str, int] = {}
    for members in groups.values():
        best = max(members, key=lambda w: counts[w])
        folded[best] = sum(counts[w] for w in members)

    ranked = sorted(folded, key=lambda w: folded[w], reverse=True)

    phrases = [
        m.group(1).lower()
        for m in _QUOTED_PHRASE.finditer(query)
        if len(m.group(1)) >= min_word_length
    ]

    keywords: list[str] = []
    for term in ranked + phrases:
        if term not in keywords:
            keywords.append(term)
    keywords = keywords[:max_keywords]

    log.debug(f"Extracted {len(keywords)} keywords from query: {keywords}")
    return keywords
