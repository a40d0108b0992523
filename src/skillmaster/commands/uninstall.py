"""Uninstall command implementation."""

from pathlib import Path

import click
from rich.console import Console

from skillmaster.core.github import InvalidFormatError, parse_repo_spec
from skillmaster.core.installer import InstallError, NotInstalledError, uninstall_package
from skillmaster.core.manifest import Manifest, ManifestError

console = Console()


@click.command()
@click.argument("repo_spec")
@click.option("--keep-manifest", is_flag=True, help="Keep the entry in skillmaster.json")
def uninstall(repo_spec: str, keep_manifest: bool):
    """Uninstall a package.

    REPO_SPEC is the package in owner/repo format. Its directory is deleted
    immediately, without confirmation.
    """
    project_dir = Path.cwd()

    try:
        package = parse_repo_spec(repo_spec)
        manifest = Manifest.load(project_dir)
    except (InvalidFormatError, ManifestError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"[blue]Uninstalling[/blue] {package}...")

    install_dir = manifest.install_path(project_dir)
    try:
        uninstall_package(package.owner, package.name, install_dir)
        console.print(f"  Removed {manifest.config.install_dir}/{package.namespace}/")
    except NotInstalledError as e:
        if not manifest.has_dependency(package.key):
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        console.print(f"  [yellow]{e}[/yellow]")
    except InstallError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not keep_manifest and manifest.has_dependency(package.key):
        manifest.remove_dependency(package.key)
        try:
            manifest.save(project_dir)
        except ManifestError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        console.print("  Removed from skillmaster.json")

    console.print(f"\n[green]✓[/green] Successfully uninstalled [bold]{package}[/bold]")
