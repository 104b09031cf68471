"""Entry point for prbranch CLI."""

import os
import sys

import typer
from rich.console import Console

from prbranch import __version__
from prbranch.cli.setup import setup_command
from prbranch.cli.validate import validate_command
from prbranch.utils.exit_codes import ExitCode
from prbranch.utils.logging import setup_logging

app = typer.Typer(
    name="prbranch",
    help="Prepare the git branch for GitHub issue and pull request automation",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

# Register commands
app.command("setup")(setup_command)
app.command("validate")(validate_command)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"prbranch {__version__}")
        raise typer.Exit()


@app.callback()
def _global_options(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the prbranch version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Log git commands that would change the working copy instead of running them",
    ),
) -> None:
    """Global options processed before subcommands."""
    setup_logging(log_level.upper())

    env_dry_run = os.environ.get("PRBRANCH_DRY_RUN")
    if env_dry_run is not None:
        dry_run = env_dry_run.strip().lower() in {"1", "true", "yes", "on"}

    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run


def main() -> int:
    """Main entry point for the CLI."""
    try:
        app()
        return ExitCode.SUCCESS
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return ExitCode.INTERRUPTED
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
