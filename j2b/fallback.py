"""Rule-based branch naming, used when the model tier is unavailable.

tokenize → classify → score → rank → assemble. No I/O, no randomness: the same
summary, description and prefix always give the same branch name.
"""

import re

from j2b.lexicon import GENERIC_WORDS, STOP_WORDS, is_action, is_tech_term, tokenize, words
from j2b.models import TokenAnalysis
from j2b.slug import finalize_branch_name

MAX_NAME_PARTS = 4
MAX_NAME_LENGTH = 30
MAX_BACKFILL_WORDS = 3
DEFAULT_NAME = "update"


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _is_entity_shaped(token: str) -> bool:
    return len(token) > 4 or token.endswith(("ing", "tion", "ment"))


def _score(token: str, entities: set[str]) -> int:
    score = 1
    if is_action(token):
        score += 5
    if is_tech_term(token):
        score += 4
    if token in entities:
        score += 2
    if len(token) > 6:
        score += 1
    if token in GENERIC_WORDS:
        score -= 1
    return score


def _primary_action(summary: str, actions: list[str]) -> str | None:
    # The summary's own word order wins over the filtered token order.
    for word in words(summary):
        if is_action(word):
            return word
    return actions[0] if actions else None


def analyze_tokens(summary: str, description: str | None = None) -> TokenAnalysis:
    tokens = tokenize(f"{summary} {description or ''}")
    distinct = _unique(tokens)

    actions = [t for t in distinct if is_action(t)]
    tech_terms = [t for t in distinct if is_tech_term(t)]
    entities = [t for t in distinct if t not in actions and t not in tech_terms and _is_entity_shaped(t)]

    entity_set = set(entities)
    # sorted() is stable, so equal scores keep first-occurrence order.
    ranked = sorted(distinct, key=lambda t: -_score(t, entity_set))

    return TokenAnalysis(
        tokens=tokens,
        actions=actions,
        entities=entities,
        tech_terms=tech_terms,
        primary_action=_primary_action(summary, actions),
        ranked_tokens=ranked,
    )


def _backfill(summary: str, used: list[str]) -> list[str]:
    candidates = re.sub(r"[^\w\s]", " ", summary.lower()).split()
    picked: list[str] = []
    for word in candidates:
        if len(picked) == MAX_BACKFILL_WORDS:
            break
        if len(word) > 3 and word not in STOP_WORDS and word not in used and word not in picked:
            picked.append(word)
    return picked


def assemble_name(analysis: TokenAnalysis, summary: str) -> str:
    """Join the best-ranked tokens into a short hyphenated name (never empty)."""
    parts = [analysis.primary_action] if analysis.primary_action else []

    for token in analysis.ranked_tokens:
        if len(parts) >= MAX_NAME_PARTS or len("-".join(parts)) >= MAX_NAME_LENGTH:
            break
        if token not in parts:
            parts.append(token)

    if len(parts) < 2:
        parts.extend(_backfill(summary, parts))

    name = re.sub(r"-+", "-", "-".join(parts)).strip("-")
    name = name[:MAX_NAME_LENGTH].strip("-")
    return name or DEFAULT_NAME


def generate_fallback(ticket_id: str, summary: str, description: str | None = None, prefix: str | None = None) -> str:
    """Return a branch name like ``feature/EH-1234-fix-authentication-validation``."""
    analysis = analyze_tokens(summary or "", description)
    name = assemble_name(analysis, summary or "")
    return finalize_branch_name(f"{ticket_id}-{name}", prefix, ticket_id)
