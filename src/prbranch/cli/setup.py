"""Prepare the working copy for an issue or pull request event."""

import json
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer import Context

from prbranch.branch.resolver import BranchInfo, BranchResolver
from prbranch.git.validation import BranchNameError
from prbranch.git.working_copy import GitCommandError, WorkingCopy
from prbranch.github.context import (
    ActionInputs,
    ConfigurationError,
    build_context,
    context_from_environment,
)
from prbranch.github.repository import RepositoryError, RepositoryMetadataFetcher
from prbranch.utils.exit_codes import ExitCode

console = Console()


def _render_summary(info: BranchInfo) -> Table:
    table = Table(title="branch setup")
    table.add_column("Field", style="bold")
    table.add_column("Branch", style="cyan")
    table.add_row("Base branch", info.base_branch)
    table.add_row("New branch", info.claude_branch or "-")
    table.add_row("Current branch", info.current_branch)
    return table


def _resolve_inputs(
    base_branch: str | None,
    branch_prefix: str | None,
    commit_signing: bool | None,
) -> ActionInputs:
    """Merge CLI options over the action inputs from the environment."""
    environ = dict(os.environ)
    if commit_signing is not None:
        # An explicit flag replaces the action input
        environ.pop("INPUT_USE_COMMIT_SIGNING", None)
    env_inputs = ActionInputs.from_env(environ)
    return ActionInputs(
        base_branch=base_branch or env_inputs.base_branch,
        branch_prefix=branch_prefix if branch_prefix is not None else env_inputs.branch_prefix,
        use_commit_signing=(
            commit_signing if commit_signing is not None else env_inputs.use_commit_signing
        ),
    )


def setup_command(
    ctx: Context,
    repo: str | None = typer.Option(None, "--repo", "-r", help="Repository as owner/name"),
    issue: int | None = typer.Option(None, "--issue", help="Issue number"),
    pr: int | None = typer.Option(None, "--pr", help="Pull request number"),
    event_name: str | None = typer.Option(
        None, "--event-name", help="GitHub event name (defaults to GITHUB_EVENT_NAME)"
    ),
    event_path: Path | None = typer.Option(
        None, "--event-path", help="Event payload file (defaults to GITHUB_EVENT_PATH)"
    ),
    base_branch: str | None = typer.Option(
        None, "--base-branch", "-b", help="Branch to cut new branches from"
    ),
    branch_prefix: str | None = typer.Option(
        None, "--branch-prefix", help="Prefix for generated branch names"
    ),
    commit_signing: bool | None = typer.Option(
        None,
        "--commit-signing/--no-commit-signing",
        help="Defer new branch creation to the signed-commit step",
    ),
    path: Path = typer.Option(Path("."), "--path", "-p", help="Working copy to prepare"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Check out or create the branch the bot should work on."""
    dry_run = ctx.obj.get("dry_run", False) if ctx.obj else False

    if issue is not None and pr is not None:
        console.print("[red]Use either --issue or --pr, not both[/red]")
        raise typer.Exit(ExitCode.INVALID_CONFIG)

    try:
        inputs = _resolve_inputs(base_branch, branch_prefix, commit_signing)
        if issue is not None or pr is not None:
            if not repo:
                raise ConfigurationError("--repo is required with --issue or --pr")
            number = pr if pr is not None else issue
            context = build_context(repo, number, pr is not None, inputs)
        else:
            environ = dict(os.environ)
            if event_name:
                environ["GITHUB_EVENT_NAME"] = event_name
            if event_path:
                environ["GITHUB_EVENT_PATH"] = str(event_path)
            context = context_from_environment(environ, inputs=inputs)

        working_copy = WorkingCopy(path, dry_run=dry_run)
        resolver = BranchResolver(working_copy, RepositoryMetadataFetcher())
        info = resolver.setup(context)
    except BranchNameError as e:
        console.print(f"[red]Invalid branch name: {escape(str(e))}[/red]")
        raise typer.Exit(ExitCode.INVALID_BRANCH_NAME) from e
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(ExitCode.INVALID_CONFIG) from e
    except (GitCommandError, RepositoryError) as e:
        console.print(f"[red]Branch setup failed: {escape(str(e))}[/red]")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    if as_json:
        console.print_json(json.dumps(info.to_dict()))
    else:
        console.print(_render_summary(info))
