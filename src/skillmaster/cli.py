"""CLI entry point for skillmaster."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from skillmaster import __version__
from skillmaster.commands import init, install, uninstall, list_cmd, search, config_cmd
from skillmaster.core.config import Settings, SettingsError

console = Console()


def setup_logging(verbose: bool) -> None:
    """Send skillmaster log records to stderr through rich."""
    logger = logging.getLogger("skillmaster")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@click.group()
@click.version_option(version=__version__, prog_name="skillmaster")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """SkillMaster - a package manager for AI assistant markdown files.

    Fetch prompts, instructions and context files from GitHub repositories
    into your project.

    Examples:

        skillmaster init

        skillmaster install anthropic/claude-best-practices

        skillmaster list

        skillmaster search react
    """
    setup_logging(verbose)

    if ctx.obj is None:
        try:
            settings = Settings.load()
            settings.initialize()
        except SettingsError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        ctx.obj = settings


# Register commands
main.add_command(init.init)
main.add_command(install.install)
main.add_command(uninstall.uninstall)
main.add_command(list_cmd.list_packages)
main.add_command(search.search)
main.add_command(config_cmd.show_config)


if __name__ == "__main__":
    main()
