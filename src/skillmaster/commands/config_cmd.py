"""Config command implementation."""

import click
import yaml
from rich.console import Console
from rich.panel import Panel

from skillmaster.core.config import Settings

console = Console()


@click.command("config")
@click.option("--raw", "-r", is_flag=True, help="Show the raw settings file contents")
@click.pass_obj
def show_config(settings: Settings, raw: bool):
    """Show the current SkillMaster settings."""
    path = settings.settings_path
    status = "[green]exists[/green]" if path.exists() else "[yellow]using defaults (file not found)[/yellow]"

    if settings.github_token:
        source = " from GITHUB_TOKEN" if settings.token_from_env else ""
        token = f"[green]configured{source}[/green] ({settings.masked_token})"
    else:
        token = "[yellow]not configured[/yellow]"

    lines = [
        f"[bold]Settings file:[/bold] {path}",
        f"[bold]Status:[/bold] {status}",
        f"[bold]Install directory:[/bold] {settings.install_dir}",
        f"[bold]GitHub API:[/bold] {settings.api_url}",
        f"[bold]GitHub token:[/bold] {token}",
    ]
    console.print(Panel("\n".join(lines), title="SkillMaster configuration"))

    if not settings.github_token:
        console.print("[dim]Set GITHUB_TOKEN or add github.token to the settings file "
                      "to raise the API rate limit[/dim]")

    if raw:
        data = settings.to_dict()
        if data["github"]["token"]:
            data["github"]["token"] = settings.masked_token
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False), markup=False)
