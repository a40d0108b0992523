"""List command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from skillmaster.core.github import InvalidFormatError, parse_repo_spec
from skillmaster.core.installer import count_installed_files
from skillmaster.core.manifest import Manifest, ManifestError

console = Console()


@click.command("list")
def list_packages():
    """List all packages in the project manifest."""
    project_dir = Path.cwd()

    try:
        manifest = Manifest.load(project_dir)
    except ManifestError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not manifest.dependencies:
        console.print("No packages installed")
        console.print("\nInstall packages with: skillmaster install <owner/repo>")
        raise SystemExit(0)

    install_dir = manifest.install_path(project_dir)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Version")
    table.add_column("Files")

    for key in sorted(manifest.dependencies):
        version = manifest.dependencies[key]
        try:
            package = parse_repo_spec(key)
        except InvalidFormatError:
            table.add_row(key, version, "[red]invalid package name[/red]")
            continue

        file_count = count_installed_files(install_dir, package.owner, package.name)
        files = f"{file_count} file(s)" if file_count else "[red]not installed[/red]"
        table.add_row(key, version, files)

    console.print(table)
    console.print(f"\n[dim]Installation directory: {manifest.config.install_dir}[/dim]")
