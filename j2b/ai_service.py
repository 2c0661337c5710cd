"""Prompted calls on top of a ModelProvider.

Each call returns Ok(value) or Err(error) instead of raising, so the naming
layer can decide between the model answer and the rule-based fallback with a
single ``match``.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Generic, TypeVar

import pydantic

from j2b.errors import ProviderError
from j2b.models import ChatCompletionRequest, ChatMessage, GenerationConfig, TicketAnalysis, TicketContext
from j2b.providers.base import ModelProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ProviderError


Result = Ok[T] | Err

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert software engineer who creates concise, meaningful Git branch names "
    "from Jira tickets. Always respond with valid JSON."
)

SUMMARY_SYSTEM_PROMPT = "You are a Git branch naming expert. Generate concise, meaningful branch name suffixes."

PR_TITLE_SYSTEM_PROMPT = (
    "You write short, plain-English GitHub pull request titles. "
    "Respond with the title only, using letters, digits and spaces."
)

_ANALYSIS_TEMPLATE = """\
Analyze this Jira ticket and create a concise Git branch name:

Ticket ID: {ticket_id}
Summary: {summary}
Description: {description}

Create a branch name following this format: <ticket-id>-<2-4-meaningful-words>

Requirements:
- Max 40 characters total
- Use hyphens between words, no spaces
- Keep the ticket ID exactly as written above
- Focus on the primary action and key technical terms
- Avoid redundant words
- Be specific but concise

Return JSON with this structure:
{{
  "primaryAction": "main action verb (fix, add, update, etc.)",
  "technicalContext": ["array", "of", "technical", "terms"],
  "businessContext": ["array", "of", "business", "terms"],
  "suggestedBranchName": "the-actual-branch-name",
  "reasoning": "brief explanation of why this name was chosen"
}}

Example:
For "Fix user authentication validation in login API endpoint":
{{
  "primaryAction": "fix",
  "technicalContext": ["authentication", "validation", "api", "endpoint"],
  "businessContext": ["user", "login"],
  "suggestedBranchName": "EH-1234-fix-auth-validation",
  "reasoning": "Focuses on the primary action 'fix' and key technical components 'auth' and 'validation'"
}}
"""

_SUMMARY_TEMPLATE = """\
Summarize this Jira ticket in 3-5 key words for a Git branch name:

Ticket: {ticket_id}
Summary: {summary}
Description: {description}

Create a concise branch suffix (2-4 words max) that captures the essence.
Focus on: action + main technical component + context
Avoid: articles, prepositions, redundant words
Use: lowercase with hyphens

Examples:
- "Fix user authentication bug" → "fix-auth-bug"
- "Add payment integration API" → "add-payment-api"
- "Update database schema for users" → "update-user-schema"

Return only the branch suffix (no ticket ID):
"""

_PR_TITLE_TEMPLATE = """\
Write a pull request title for a branch with these commits (oldest first):

{commits}

Rules:
- Plain English, at most 72 characters
- Summarize the overall change, not each commit
- Use only letters, digits and spaces
- Do not use quotes, backticks, colons, semicolons, parentheses, brackets, slashes,
  hashes, asterisks, ampersands, dollar signs, exclamation or question marks

Return only the title:
"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _ask(provider: ModelProvider, system: str, prompt: str, temperature: float, max_tokens: int) -> str:
    request = ChatCompletionRequest(
        messages=[ChatMessage(role="system", content=system), ChatMessage(role="user", content=prompt)],
        temperature=temperature,
        max_tokens=max_tokens,
    )
    return provider.create_chat_completion(request).content.strip()


def _parse_analysis(content: str) -> TicketAnalysis:
    fenced = _CODE_FENCE.match(content)
    if fenced:
        content = fenced.group(1)
    try:
        analysis = TicketAnalysis.model_validate(json.loads(content))
    except (json.JSONDecodeError, pydantic.ValidationError) as exc:
        raise ProviderError(f"Malformed analysis response: {exc}") from exc
    if not analysis.suggested_branch_name.strip():
        raise ProviderError("Analysis response has no suggestedBranchName")
    return analysis


def analyze_ticket(provider: ModelProvider, config: GenerationConfig, ticket: TicketContext) -> Result[TicketAnalysis]:
    prompt = _ANALYSIS_TEMPLATE.format(
        ticket_id=ticket.id,
        summary=ticket.summary,
        description=ticket.description or "No description provided",
    )
    try:
        content = _ask(provider, ANALYSIS_SYSTEM_PROMPT, prompt, config.temperature, config.max_tokens)
        return Ok(_parse_analysis(content))
    except ProviderError as exc:
        logger.warning("AI analysis failed: %s", exc)
        return Err(exc)


def summarize_ticket(provider: ModelProvider, config: GenerationConfig, ticket: TicketContext) -> Result[str]:
    prompt = _SUMMARY_TEMPLATE.format(ticket_id=ticket.id, summary=ticket.summary, description=ticket.description or "")
    try:
        return Ok(_ask(provider, SUMMARY_SYSTEM_PROMPT, prompt, config.summary_temperature, config.summary_max_tokens))
    except ProviderError as exc:
        logger.warning("AI summary failed: %s", exc)
        return Err(exc)


def title_pull_request(provider: ModelProvider, config: GenerationConfig, commit_message: str) -> Result[str]:
    prompt = _PR_TITLE_TEMPLATE.format(commits=commit_message)
    try:
        return Ok(_ask(provider, PR_TITLE_SYSTEM_PROMPT, prompt, config.summary_temperature, config.max_tokens))
    except ProviderError as exc:
        logger.warning("AI PR title failed: %s", exc)
        return Err(exc)
