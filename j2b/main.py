"""jira-to-branch command line: branch, slug, pr, config and connection commands."""

import logging
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from j2b import git
from j2b.errors import J2bError
from j2b.models import GeneratedIdentifier, Ticket, TicketAnalysis
from j2b.naming import generate, generate_pr_title, generate_with_analysis
from j2b.providers.factory import PROVIDER_NAMES, create_model_provider
from j2b.settings import J2bSettings, get_settings
from j2b.tracker import JiraClient, extract_ticket_key

app = typer.Typer(help="jira-to-branch: AI branch names and PR titles from Jira tickets", no_args_is_help=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-P", help="Profile name from ~/.config/j2b/config.toml"),
]
PrefixOpt = Annotated[str | None, typer.Option("--prefix", "-p", help="Override default branch prefix")]
AnalysisOpt = Annotated[bool, typer.Option("--analysis", "-a", help="Show the AI analysis behind the name")]


@app.callback()
def main(debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=debug)],
        force=True,
    )


def _fail(message: str) -> typer.Exit:
    rprint(f"[red]✗ {message}[/red]")
    return typer.Exit(1)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _ticket_table(ticket: Ticket) -> Table:
    table = Table(title=f"{ticket.key}: {ticket.summary}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Type", ticket.issue_type or "Unknown")
    table.add_row("Status", ticket.status or "Unknown")
    table.add_row("Priority", ticket.priority or "Unknown")
    table.add_row("Assignee", ticket.assignee or "Unassigned")
    if ticket.url:
        table.add_row("URL", ticket.url)
    return table


def _analysis_table(analysis: TicketAnalysis) -> Table:
    table = Table(title="AI Analysis")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Primary Action", analysis.primary_action)
    table.add_row("Technical Context", ", ".join(analysis.technical_context) or "—")
    table.add_row("Business Context", ", ".join(analysis.business_context) or "—")
    table.add_row("Reasoning", analysis.reasoning or "—")
    return table


def _resolve_branch(
    ticket_input: str, settings: J2bSettings, prefix: str | None, analysis: bool
) -> tuple[Ticket, GeneratedIdentifier]:
    try:
        key = extract_ticket_key(ticket_input)
    except ValueError as exc:
        raise _fail(str(exc)) from exc

    try:
        ticket = JiraClient(settings).get_issue(key)
        ctx = ticket.context()
        effective_prefix = prefix or settings.default_branch_prefix
        config = settings.generation_config()
        if analysis:
            result = generate_with_analysis(ctx.id, ctx.summary, ctx.description, effective_prefix, config=config)
        else:
            result = GeneratedIdentifier(
                slug=generate(ctx.id, ctx.summary, ctx.description, effective_prefix, config=config)
            )
    except RuntimeError as exc:  # J2bError included
        raise _fail(f"Failed to generate branch name: {exc}") from exc
    return ticket, result


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("create")
def create_cmd(
    ticket: Annotated[str, typer.Argument(help="Jira ticket ID or URL (e.g. EH-1234)")],
    prefix: PrefixOpt = None,
    analysis: AnalysisOpt = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
    profile: ProfileOpt = None,
) -> None:
    """Create and check out a branch named after a Jira ticket."""
    try:
        git.ensure_git_repository()
    except RuntimeError as exc:
        raise _fail(str(exc)) from exc

    settings = get_settings(profile=profile)
    issue, result = _resolve_branch(ticket, settings, prefix, analysis)

    rprint(_ticket_table(issue))
    rprint(f"🌿 Branch: [green]{result.slug}[/green]")
    if result.analysis:
        rprint(_analysis_table(result.analysis))

    if git.branch_exists(result.slug):
        raise _fail(f"Branch '{result.slug}' already exists")

    if not yes:
        rprint(f"📍 Current branch: [yellow]{git.current_branch()}[/yellow]")
        if not typer.confirm(f"Create branch {result.slug}?", default=True):
            rprint("Operation cancelled.")
            raise typer.Exit(0)

    try:
        git.create_branch(result.slug)
    except RuntimeError as exc:
        raise _fail(str(exc)) from exc
    rprint(f"[green]✓[/green] Created and switched to [bold]{result.slug}[/bold]")


app.command("branch", help="Alias for create.")(create_cmd)
app.command("b", hidden=True)(create_cmd)


@app.command("slug")
def slug_cmd(
    ticket: Annotated[str, typer.Argument(help="Jira ticket ID or URL")],
    prefix: PrefixOpt = None,
    profile: ProfileOpt = None,
) -> None:
    """Print the generated branch name (no trailing newline)."""
    settings = get_settings(profile=profile)
    _, result = _resolve_branch(ticket, settings, prefix, analysis=False)
    # No trailing newline, for $(j2b slug EH-1234)
    typer.echo(result.slug, nl=False)


@app.command("pr")
def pr_cmd(
    base: Annotated[str | None, typer.Option("--base", "-b", help="Base branch to diff commits against")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
    profile: ProfileOpt = None,
) -> None:
    """Create a GitHub PR for the current branch with an AI-written title."""
    if not git.gh_available():
        raise _fail("GitHub CLI is not installed. Install it from https://cli.github.com/")

    settings = get_settings(profile=profile)
    try:
        git.ensure_git_repository()
        head = git.current_branch()
        subjects = git.commit_subjects(base or settings.base_branch)
        title = generate_pr_title(subjects, config=settings.generation_config())
    except RuntimeError as exc:  # J2bError included
        raise _fail(str(exc)) from exc

    rprint(f"📝 PR title: [green]{title}[/green]")
    if not yes and not typer.confirm("Create pull request?", default=True):
        rprint("Operation cancelled.")
        raise typer.Exit(0)

    try:
        git.create_pull_request(title, head)
    except RuntimeError as exc:
        raise _fail(str(exc)) from exc
    rprint(f"[green]✓[/green] Created PR: {title}")


app.command("c", hidden=True)(pr_cmd)


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(profile=profile)
    ai = settings.generation_config()

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 4:
            return "***"
        return f"***{val[-4:]}"

    table = Table(title="j2b Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("jira_host", settings.jira_host or "[dim](not set)[/dim]")
    table.add_row("jira_email", settings.jira_email or "[dim](not set)[/dim]")
    table.add_row("jira_token", mask(settings.jira_token.get_secret_value() if settings.jira_token else None))
    table.add_row("ai_provider", PROVIDER_NAMES.get(ai.provider, ai.provider))
    table.add_row("ai_api_key", mask(ai.secret()))
    table.add_row("ai_model", ai.model)
    table.add_row("ai_temperature", str(ai.temperature))
    table.add_row("ai_max_tokens", str(ai.max_tokens))
    if ai.base_url:
        table.add_row("ai_base_url", ai.base_url)
    if ai.organization_id:
        table.add_row("ai_organization_id", ai.organization_id)
    table.add_row("allow_fallback", str(ai.allow_fallback).lower())
    table.add_row("default_branch_prefix", settings.default_branch_prefix or "[dim](not set)[/dim]")
    table.add_row("base_branch", settings.base_branch)

    rprint(table)


@app.command("test-connection")
def check_connection(profile: ProfileOpt = None) -> None:
    """Check that the AI provider and Jira credentials work."""
    settings = get_settings(profile=profile)
    ok = True

    try:
        provider = create_model_provider(settings.generation_config())
    except J2bError as exc:
        rprint(f"[red]✗[/red] AI provider: {exc}")
        ok = False
    else:
        if provider.test_connection():
            rprint(f"[green]✓[/green] AI provider: {provider.name} ({provider.model})")
        else:
            rprint(f"[red]✗[/red] AI provider: {provider.name} did not answer")
            ok = False

    try:
        jira_ok = JiraClient(settings).test_connection()
    except RuntimeError as exc:
        rprint(f"[red]✗[/red] Jira: {exc}")
        ok = False
    else:
        if jira_ok:
            rprint(f"[green]✓[/green] Jira: {settings.jira_host}")
        else:
            rprint("[red]✗[/red] Jira: authentication or connection failed")
            ok = False

    if not ok:
        raise typer.Exit(1)
