"""Branch-name and PR-title generation.

The model tier is tried first. When it is unavailable or fails, branch names
fall back to the rule-based generator (if ``config.allow_fallback``). PR titles
have no fallback.
"""

import logging
import re
from collections.abc import Sequence

from j2b.ai_service import Err, Ok, analyze_ticket, summarize_ticket, title_pull_request
from j2b.errors import ConfigurationError, ProviderError, ValidationError
from j2b.fallback import analyze_tokens, generate_fallback
from j2b.models import GeneratedIdentifier, GenerationConfig, TicketAnalysis, TicketContext
from j2b.providers.factory import create_model_provider
from j2b.slug import finalize_branch_name, sanitize_branch_name

logger = logging.getLogger(__name__)

MAX_COMMIT_TEXT = 2000
_TITLE_DISALLOWED = re.compile(r"[^A-Za-z0-9 ]+")


def _require_summary(summary: str | None) -> str:
    if not summary or not summary.strip():
        raise ValidationError("Ticket summary is required to generate a branch name")
    return summary


def _clean_suffix(suffix: str, ticket_id: str) -> str:
    """Reduce a model-written name to its branch-safe part after the ticket id.

    Quoting and a leading copy of the ticket id (any case) are dropped. An
    empty result means the reply is unusable.
    """
    suffix = suffix.strip().strip("`\"'").strip()
    head = suffix[: len(ticket_id) + 1].lower()
    if head in (ticket_id.lower(), f"{ticket_id.lower()}-"):
        suffix = suffix[len(ticket_id) :]
    return sanitize_branch_name(suffix)


def _fallback_analysis(summary: str, description: str | None) -> TicketAnalysis:
    tokens = analyze_tokens(summary, description)
    return TicketAnalysis(
        primary_action=tokens.primary_action or "update",
        technical_context=tokens.tech_terms,
        business_context=tokens.entities,
        reasoning="Rule-based name: primary action first, then the highest-scoring ticket keywords.",
    )


def _no_model(what: str, config: GenerationConfig) -> None:
    if not config.allow_fallback:
        raise ConfigurationError(f"AI API key is required for {what}")
    logger.warning("No AI API key configured; using rule-based branch name")


def _model_failed(error: ProviderError, config: GenerationConfig) -> None:
    if not config.allow_fallback:
        raise ProviderError(f"AI branch generation failed: {error}") from error
    logger.warning("AI branch generation failed (%s); using rule-based branch name", error)


def generate(
    ticket_id: str,
    summary: str,
    description: str | None = None,
    prefix: str | None = None,
    *,
    config: GenerationConfig,
) -> str:
    """Return a branch name for the ticket, e.g. ``feature/EH-1234-fix-auth-bug``."""
    summary = _require_summary(summary)

    if not config.secret():
        _no_model("branch generation", config)
        return generate_fallback(ticket_id, summary, description, prefix)

    provider = create_model_provider(config)
    ticket = TicketContext(id=ticket_id, summary=summary, description=description)

    match summarize_ticket(provider, config, ticket):
        case Ok(value=raw):
            suffix = _clean_suffix(raw, ticket_id)
            if suffix:
                return finalize_branch_name(f"{ticket_id}-{suffix}", prefix, ticket_id)
            error = ProviderError("model returned an unusable branch suffix")
        case Err(error=error):
            pass

    _model_failed(error, config)
    return generate_fallback(ticket_id, summary, description, prefix)


def generate_with_analysis(
    ticket_id: str,
    summary: str,
    description: str | None = None,
    prefix: str | None = None,
    *,
    config: GenerationConfig,
) -> GeneratedIdentifier:
    """Like generate(), but uses the structured analysis call and returns the analysis too.

    The suggested name always ends up behind the ticket id as given, whether or
    not the model repeated it.
    """
    summary = _require_summary(summary)

    if not config.secret():
        _no_model("branch analysis", config)
    else:
        provider = create_model_provider(config)
        ticket = TicketContext(id=ticket_id, summary=summary, description=description)
        match analyze_ticket(provider, config, ticket):
            case Ok(value=analysis):
                suffix = _clean_suffix(analysis.suggested_branch_name, ticket_id)
                if suffix:
                    slug = finalize_branch_name(f"{ticket_id}-{suffix}", prefix, ticket_id)
                    return GeneratedIdentifier(slug=slug, analysis=analysis)
                error = ProviderError(f"model suggested an unusable branch name {analysis.suggested_branch_name!r}")
            case Err(error=error):
                pass
        _model_failed(error, config)

    return GeneratedIdentifier(
        slug=generate_fallback(ticket_id, summary, description, prefix),
        analysis=_fallback_analysis(summary, description),
    )


def join_commit_messages(commit_messages: Sequence[str]) -> str:
    """Join subjects (oldest first) into one prompt block of at most MAX_COMMIT_TEXT characters."""
    subjects = [m.strip() for m in commit_messages if m and m.strip()]
    if not subjects:
        raise ValidationError("No commit messages found")
    joined = "\n".join(subjects)
    if len(joined) > MAX_COMMIT_TEXT:
        joined = joined[:MAX_COMMIT_TEXT] + "..."
    return joined


def sanitize_pr_title(title: str) -> str:
    return " ".join(_TITLE_DISALLOWED.sub(" ", title).split())


def generate_pr_title(commit_messages: Sequence[str], *, config: GenerationConfig) -> str:
    """Return a plain-English PR title for the commits. Raises on any model failure."""
    commit_text = join_commit_messages(commit_messages)
    if not config.secret():
        raise ConfigurationError("AI API key is required for PR generation")

    provider = create_model_provider(config)
    match title_pull_request(provider, config, commit_text):
        case Ok(value=raw):
            title = sanitize_pr_title(raw)
            if not title:
                raise ProviderError("AI PR generation failed: model returned an empty title")
            return title
        case Err(error=error):
            raise ProviderError(f"AI PR generation failed: {error}") from error
