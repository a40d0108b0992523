"""Search command implementation."""

import click
from rich.console import Console
from rich.table import Table

from skillmaster.core.config import Settings
from skillmaster.core.github import PACKAGE_TOPIC, GitHubClient, GitHubError, RateLimitError

console = Console()


@click.command()
@click.argument("query", nargs=-1, required=True)
@click.option("--limit", "-n", default=20, help="Number of results to show")
@click.pass_obj
def search(settings: Settings, query: tuple[str, ...], limit: int):
    """Search GitHub for packages.

    QUERY is one or more keywords (e.g., 'react', 'python best-practices').
    Only repositories tagged with the skillmaster-package topic are found.
    """
    query_text = " ".join(query)
    console.print(f"[blue]Searching for:[/blue] {query_text}\n")

    with GitHubClient(token=settings.github_token, base_url=settings.api_url) as client:
        try:
            results = client.search(query_text, limit=limit)
        except GitHubError as e:
            console.print(f"[red]Error:[/red] {e}")
            if isinstance(e, RateLimitError) and not settings.github_token:
                console.print(f"[dim]Add a token to {settings.settings_path} or set GITHUB_TOKEN[/dim]")
            raise SystemExit(1)

    if not results:
        console.print(f"No packages found matching: {query_text}")
        console.print(f"\n[dim]Packages must have the '{PACKAGE_TOPIC}' topic[/dim]")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Stars")
    table.add_column("Updated")
    table.add_column("Description")

    for repo in results:
        desc = repo.description
        if len(desc) > 60:
            desc = desc[:57] + "..."
        table.add_row(
            repo.full_name,
            f"⭐ {repo.stars:,}",
            repo.updated_at,
            desc,
        )

    console.print(table)
    console.print("\n[dim]Install with: skillmaster install <owner/repo>[/dim]")
