"""Tokenizer and the closed word sets consulted by the rule-based generator."""

import re

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
        "had", "her", "was", "one", "our", "out", "has", "have", "its", "into",
        "this", "that", "with", "from", "they", "will", "would", "there", "their",
        "what", "when", "which", "where", "while", "been", "were", "should", "could",
        "some", "than", "then", "them", "these", "those", "also", "just", "only",
        "very", "more", "most", "such", "each", "about", "after", "before",
    }
)  # fmt: skip

ACTION_WORDS = frozenset(
    {
        "add", "create", "fix", "update", "remove", "delete", "implement", "refactor",
        "optimize", "improve", "enhance", "validate", "enable", "disable", "migrate",
        "upgrade", "integrate", "support", "handle", "configure", "replace", "rename",
        "move", "extract", "cleanup", "deprecate", "allow", "prevent", "introduce",
        "expose", "revert", "resolve", "document", "test",
    }
)  # fmt: skip

TECH_KEYWORDS = frozenset(
    {
        "api", "database", "auth", "authentication", "authorization", "oauth", "login",
        "logout", "session", "token", "jwt", "migration", "schema", "endpoint", "cache",
        "redis", "queue", "worker", "webhook", "graphql", "rest", "http", "backend",
        "frontend", "server", "client", "service", "microservice", "config", "deploy",
        "deployment", "docker", "kubernetes", "pipeline", "build", "test", "tests",
        "unit", "integration", "logging", "metrics", "monitoring", "error", "exception",
        "performance", "query", "index", "sql", "payment", "notification", "email",
        "upload", "search", "permission", "security", "validation",
    }
)  # fmt: skip

GENERIC_WORDS = frozenset({"user", "system", "page", "form", "button", "field"})

_NON_WORD = re.compile(r"[^\w\s-]")


def words(text: str) -> list[str]:
    """Lower-case text and split it into words, keeping hyphenated compounds."""
    return _NON_WORD.sub(" ", text.lower()).split()


def tokenize(text: str) -> list[str]:
    """Return the meaningful tokens of text, in order.

    Drops tokens of two characters or fewer, stop words, and all-digit tokens.
    """
    return [w for w in words(text) if len(w) > 2 and w not in STOP_WORDS and not w.isdigit()]


def is_action(token: str) -> bool:
    return token in ACTION_WORDS


def is_tech_term(token: str) -> bool:
    return token in TECH_KEYWORDS
