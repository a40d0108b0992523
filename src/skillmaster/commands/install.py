"""Install command implementation."""

from pathlib import Path
import logging

import click
from rich.console import Console

from skillmaster.core.config import Settings
from skillmaster.core.github import (
    GitHubClient,
    GitHubError,
    InvalidFormatError,
    RateLimitError,
    RemoteClient,
    parse_repo_spec,
)
from skillmaster.core.installer import (
    InstallError,
    Installer,
    count_installed_files,
)
from skillmaster.core.manifest import Manifest, ManifestError
from skillmaster.models.package import PackageIdentifier

console = Console()
logger = logging.getLogger(__name__)


def print_github_error(package: PackageIdentifier, error: GitHubError) -> None:
    console.print(f"[red]Error:[/red] {package}: {error}")
    if isinstance(error, RateLimitError):
        console.print("[dim]Configure a GitHub token to raise the API rate limit.[/dim]")


def install_one(
    package: PackageIdentifier,
    client: RemoteClient,
    manifest: Manifest,
    project_dir: Path,
    force: bool = False,
) -> bool:
    """Install a single package and record it in the manifest. Returns True on success."""
    install_dir = manifest.install_path(project_dir)
    installer = Installer(client)

    console.print(f"[blue]Installing[/blue] {package}...")

    version = client.resolve_version(package.owner, package.name)
    console.print(f"  Version: [green]{version}[/green]")

    existing = count_installed_files(install_dir, package.owner, package.name)
    if existing and not force:
        console.print(
            f"  [yellow]{package}[/yellow] is already installed ({existing} file(s)). "
            f"Use --force to reinstall."
        )
        file_count = existing
    else:
        try:
            file_count = installer.install_package(
                package.owner, package.name, install_dir, replace=bool(existing)
            )
        except GitHubError as e:
            print_github_error(package, e)
            if existing:
                console.print(f"  [yellow]Kept the existing install ({existing} file(s))[/yellow]")
            return False
        except InstallError as e:
            console.print(f"[red]Error:[/red] {package}: {e}")
            if e.files_written:
                console.print(
                    f"  [yellow]{e.files_written} file(s) were written before the failure[/yellow]"
                )
            return False

    manifest.add_dependency(package.key, version)
    try:
        manifest.save(project_dir)
    except ManifestError as e:
        console.print(f"[red]Error:[/red] {e}")
        return False

    console.print(f"[green]✓[/green] Installed [bold]{package}[/bold]@{version}")
    console.print(
        f"  {file_count} markdown file(s) in {manifest.config.install_dir}/{package.namespace}/"
    )
    return True


def install_all(
    client: RemoteClient,
    manifest: Manifest,
    project_dir: Path,
    force: bool = False,
) -> tuple[int, int]:
    """Install every manifest dependency. Returns (installed, total).

    A failing package is reported and skipped; the rest are still installed.
    """
    keys = list(manifest.dependencies)
    installed = 0

    for key in keys:
        try:
            package = parse_repo_spec(key)
        except InvalidFormatError as e:
            console.print(f"[red]Error:[/red] {e}")
            continue

        try:
            ok = install_one(package, client, manifest, project_dir, force)
        except Exception:
            logger.exception("Unexpected failure installing %s", key)
            ok = False

        if ok:
            installed += 1
        else:
            logger.warning("Skipping %s after failure", key)
        console.print("")

    return installed, len(keys)


@click.command()
@click.argument("repo_spec", required=False)
@click.option("--force", "-f", is_flag=True, help="Reinstall even if already installed")
@click.pass_obj
def install(settings: Settings, repo_spec: str | None, force: bool):
    """Install a package from GitHub.

    REPO_SPEC is the package in owner/repo format
    (e.g., anthropic/claude-best-practices). Without it, every package
    listed in skillmaster.json is installed.
    """
    project_dir = Path.cwd()

    try:
        manifest = Manifest.load(project_dir)
    except ManifestError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    package = None
    if repo_spec:
        try:
            package = parse_repo_spec(repo_spec)
        except InvalidFormatError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
    elif not manifest.dependencies:
        console.print("No packages listed in skillmaster.json")
        console.print("\nInstall a package with: skillmaster install <owner/repo>")
        raise SystemExit(0)

    if not settings.github_token:
        console.print("[yellow]No GitHub token configured. API rate limits will be lower.[/yellow]")
        console.print(f"[dim]Add a token to {settings.settings_path} or set GITHUB_TOKEN[/dim]\n")

    with GitHubClient(token=settings.github_token, base_url=settings.api_url) as client:
        if package is not None:
            if not install_one(package, client, manifest, project_dir, force):
                raise SystemExit(1)
            return

        installed, total = install_all(client, manifest, project_dir, force)

    color = "green" if installed == total else "yellow"
    console.print(f"[{color}]Installed {installed} of {total} package(s)[/{color}]")
    if installed < total:
        raise SystemExit(1)
