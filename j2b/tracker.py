"""Jira REST API v2 client."""

import re

import httpx

from j2b.models import Ticket
from j2b.settings import J2bSettings

TIMEOUT = 15

_FIELDS = "summary,description,issuetype,status,priority,assignee"

_URL_PATTERNS = (
    re.compile(r"/browse/([A-Z][A-Z0-9]*-\d+)"),
    re.compile(r"/projects/[^/]+/issues/([A-Z][A-Z0-9]*-\d+)"),
    re.compile(r"(?:^|[/=])([A-Z][A-Z0-9]*-\d+)(?=[?#]|$)"),
)
_BARE_KEY = re.compile(r"^([A-Z][A-Z0-9]*-\d+)$", re.IGNORECASE)

_STATUS_MESSAGES = {
    401: "Authentication failed. Check your Jira email and API token.",
    403: "Access denied. You may not have permission to view this issue.",
    429: "Rate limit exceeded. Try again in a few minutes.",
}


def extract_ticket_key(text: str) -> str:
    """Return the Jira key from a bare key or a Jira URL.

    EH-1234, eh-1234                                         → EH-1234
    https://company.atlassian.net/browse/EH-1234             → EH-1234
    https://company.atlassian.net/projects/EH/issues/EH-1234 → EH-1234
    """
    text = text.strip()
    for pattern in _URL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    bare = _BARE_KEY.match(text)
    if bare:
        return bare.group(1).upper()
    raise ValueError(
        "Invalid Jira ticket format. Supported formats:\n"
        "  • Ticket ID: EH-1234\n"
        "  • Browse URL: https://company.atlassian.net/browse/EH-1234\n"
        "  • Project URL: https://company.atlassian.net/projects/EH/issues/EH-1234"
    )


class JiraClient:
    def __init__(self, settings: J2bSettings) -> None:
        if not (settings.jira_host and settings.jira_email and settings.jira_token):
            raise RuntimeError("jira_host, jira_email and jira_token are required. Set them in your j2b profile.")
        host = re.sub(r"^https?://", "", settings.jira_host).rstrip("/")
        self._site = f"https://{host}"
        self._base_url = f"{self._site}/rest/api/2"
        self._auth = (settings.jira_email, settings.jira_token.get_secret_value())

    def _get(self, path: str, params: dict | None = None) -> dict:
        response = httpx.get(
            f"{self._base_url}{path}",
            params=params or {},
            auth=self._auth,
            headers={"Accept": "application/json"},
            timeout=TIMEOUT,
        )
        if response.status_code in _STATUS_MESSAGES:
            raise RuntimeError(_STATUS_MESSAGES[response.status_code])
        response.raise_for_status()
        return response.json()

    def get_issue(self, key: str) -> Ticket:
        try:
            data = self._get(f"/issue/{key}", params={"fields": _FIELDS})
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise RuntimeError(f"Issue '{key}' not found. Check the ticket ID.") from exc
            raise RuntimeError(f"Jira API error ({exc.response.status_code}): {exc.response.text[:200]}") from exc
        except httpx.TimeoutException as exc:
            raise RuntimeError("Request to Jira timed out. Check your network connection.") from exc
        except httpx.ConnectError as exc:
            raise RuntimeError("Cannot connect to Jira. Check your Jira host.") from exc

        fields = data.get("fields")
        if not data.get("key") or not fields:
            raise RuntimeError("Invalid response from Jira API")

        return Ticket(
            key=data["key"],
            summary=fields.get("summary") or "",
            description=fields.get("description"),
            issue_type=(fields.get("issuetype") or {}).get("name"),
            status=(fields.get("status") or {}).get("name"),
            priority=(fields.get("priority") or {}).get("name"),
            assignee=(fields.get("assignee") or {}).get("displayName"),
            url=f"{self._site}/browse/{data['key']}",
        )

    def test_connection(self) -> bool:
        try:
            self._get("/myself")
        except (httpx.HTTPError, RuntimeError):
            return False
        return True
