"""Init command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.prompt import Confirm

from skillmaster.core.config import Settings
from skillmaster.core.manifest import MANIFEST_FILE_NAME, Manifest, ManifestError

console = Console()


def add_to_gitignore(project_dir: Path, install_dir: str) -> bool:
    """Append the install directory to an existing .gitignore.

    Returns True if the file was changed.
    """
    gitignore = project_dir / ".gitignore"
    if not gitignore.is_file():
        return False

    content = gitignore.read_text()
    if install_dir in content:
        return False

    with open(gitignore, "a") as f:
        if content and not content.endswith("\n"):
            f.write("\n")
        f.write(f"\n# SkillMaster installation directory\n{install_dir}/\n")
    return True


@click.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing skillmaster.json")
@click.pass_obj
def init(settings: Settings, force: bool):
    """Initialize a SkillMaster project in the current directory.

    Creates skillmaster.json and the installation directory.
    """
    project_dir = Path.cwd()

    if Manifest.exists(project_dir) and not force:
        console.print(f"[yellow]{MANIFEST_FILE_NAME} already exists in this directory[/yellow]")
        if not Confirm.ask("Overwrite?", default=False):
            console.print("Initialization cancelled")
            raise SystemExit(0)

    manifest = Manifest.new(project_dir.name, install_dir=settings.install_dir)
    try:
        manifest.save(project_dir)
        manifest.install_path(project_dir).mkdir(parents=True, exist_ok=True)
    except (ManifestError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    try:
        if add_to_gitignore(project_dir, manifest.config.install_dir):
            console.print(f"[green]✓[/green] Added {manifest.config.install_dir}/ to .gitignore")
    except OSError as e:
        console.print(f"[yellow]Warning:[/yellow] Could not update .gitignore: {e}")

    console.print(f"[green]✓[/green] Initialized SkillMaster project [bold]{manifest.name}[/bold]")
    console.print(
        f"  Created {MANIFEST_FILE_NAME} and {manifest.config.install_dir}/ directory"
    )
    console.print("\nNext steps:")
    console.print("  Search for packages: skillmaster search <query>")
    console.print("  Install a package:   skillmaster install <owner/repo>")
