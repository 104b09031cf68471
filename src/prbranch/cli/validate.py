"""Check branch names against the validation rules."""

import typer
from rich.console import Console
from rich.markup import escape

from prbranch.git.validation import BranchNameError, validate_branch_name
from prbranch.utils.exit_codes import ExitCode

console = Console()


def validate_command(
    names: list[str] = typer.Argument(..., help="Branch names to check"),
) -> None:
    """Validate one or more branch names."""
    rejected = 0
    for name in names:
        try:
            validate_branch_name(name)
        except BranchNameError as e:
            rejected += 1
            console.print(f"[red]✗[/red] {escape(str(e))}", highlight=False)
        else:
            console.print(f"[green]✓[/green] {escape(name)}", highlight=False)

    if rejected:
        raise typer.Exit(ExitCode.INVALID_BRANCH_NAME)
