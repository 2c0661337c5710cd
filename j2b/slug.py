"""Branch-name post-processing shared by the model and rule-based tiers."""

import re

MAX_BRANCH_LENGTH = 50

# Jira-style tracker key at the start of a branch name: EH-1234, ENG-7
_TICKET_KEY = re.compile(r"^([A-Za-z][A-Za-z0-9_]*-\d+)(?=-|$)")
_DISALLOWED = re.compile(r"[^A-Za-z0-9\-_/]")


def _split_ticket(rest: str, ticket_id: str | None) -> tuple[str, str]:
    """Split a branch name (prefix removed) into (ticket_id, generative_part)."""
    if ticket_id and (rest == ticket_id or rest.startswith(f"{ticket_id}-")):
        return ticket_id, rest[len(ticket_id) + 1 :]
    match = _TICKET_KEY.match(rest)
    if match:
        key = match.group(1)
        return key, rest[len(key) + 1 :]
    head, _, tail = rest.partition("-")
    return head, tail


def enforce_length(branch_name: str, ticket_id: str | None = None, max_length: int = MAX_BRANCH_LENGTH) -> str:
    """Shorten branch_name to max_length, cutting only the generative part.

    feature/EH-1234-implement-very-long-detailed-payment-gateway-integration
    → feature/EH-1234-implement-very-long-detailed-payme

    The ticket id is never truncated. If the prefix leaves no room for it the
    prefix is dropped.
    """
    if len(branch_name) <= max_length:
        return branch_name

    prefix_part, sep, rest = branch_name.rpartition("/")
    prefix = f"{prefix_part}{sep}"
    ticket, generative = _split_ticket(rest, ticket_id)

    if not generative:
        if ticket == ticket_id:
            return f"{prefix}{ticket}" if len(prefix) + len(ticket) <= max_length else ticket
        return branch_name[:max_length]

    if len(prefix) + len(ticket) + 1 > max_length:
        prefix = ""

    budget = max(0, max_length - len(prefix) - len(ticket) - 1)
    return f"{prefix}{ticket}-{generative[:budget]}"


def sanitize_branch_name(name: str) -> str:
    """Make name acceptable to git as a ref name.

    Only [A-Za-z0-9-_/] survive; everything else becomes a hyphen. Case is kept.
    """
    name = name.replace("`", "")
    name = _DISALLOWED.sub("-", name)
    name = re.sub(r"-{2,}", "-", name)
    name = re.sub(r"/{2,}", "/", name)
    name = name.strip("-/")
    name = name.lstrip(".")
    if name.endswith(".lock"):
        name = name[: -len(".lock")]
    return name


def apply_prefix(branch_name: str, prefix: str | None) -> str:
    prefix = (prefix or "").strip().strip("/")
    return f"{prefix}/{branch_name}" if prefix else branch_name


def finalize_branch_name(branch_name: str, prefix: str | None = None, ticket_id: str | None = None) -> str:
    """Prefix, length-enforce, and sanitize a composed branch name."""
    return sanitize_branch_name(enforce_length(apply_prefix(branch_name, prefix), ticket_id))
