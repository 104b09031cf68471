"""Git operations on a single working copy."""

import logging
import subprocess
from pathlib import Path

from prbranch.git.validation import validate_branch_name

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """Raised when a git command fails."""

    pass


class WorkingCopy:
    """Handle on one local checkout.

    All commands run with the checkout as their working directory and are
    passed to git as argument lists, so nothing is ever interpreted by a shell.
    Branch names are validated again right before each command that uses them.
    """

    REMOTE = "origin"

    def __init__(self, path: Path, dry_run: bool = False):
        """Initialize the working copy handle.

        Args:
            path: Root of the checkout
            dry_run: If True, log mutating commands instead of running them
        """
        self.path = Path(path).resolve()
        self.dry_run = dry_run
        self._validate_git_repo()

    def _validate_git_repo(self) -> None:
        """Validate that path is a git checkout."""
        git_dir = self.path / ".git"
        if not git_dir.exists():
            raise GitCommandError(f"Not a git repository: {self.path}")

    def _run_git_command(self, args: list[str], mutating: bool = True) -> str:
        """Run a git command and return its output.

        Args:
            args: Git command arguments
            mutating: Whether the command changes the checkout or refs

        Returns:
            Command output

        Raises:
            GitCommandError: If git fails or is not installed
        """
        cmd = ["git"] + args

        if self.dry_run and mutating:
            logger.info(f"[DRY RUN] Would execute: {' '.join(cmd)}")
            return "[DRY RUN]"

        logger.debug(f"Running command: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, cwd=self.path, capture_output=True, text=True, check=True)
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            logger.error(f"Git command failed: {' '.join(cmd)}")
            logger.error(f"Error: {e.stderr}")
            raise GitCommandError(f"Git command failed: {' '.join(cmd)}: {e.stderr}") from e
        except FileNotFoundError:
            raise GitCommandError("Git is not installed or not in PATH") from None

    def fetch_pull_request(self, number: int, depth: int) -> None:
        """Fetch ``refs/pull/<number>/head`` from origin.

        The numbered pull ref lives on the base repository, so this works for
        pull requests opened from forks as well.
        """
        if number <= 0:
            raise GitCommandError(f"Invalid pull request number: {number}")
        if depth <= 0:
            raise GitCommandError(f"Invalid fetch depth: {depth}")
        self._run_git_command(
            ["fetch", self.REMOTE, f"--depth={depth}", f"refs/pull/{number}/head"]
        )

    def force_checkout_fetch_head(self, branch_name: str) -> None:
        """Create or reset ``branch_name`` at FETCH_HEAD and check it out."""
        validate_branch_name(branch_name)
        self._run_git_command(["checkout", "-B", branch_name, "FETCH_HEAD"])

    def fetch_branch(self, branch_name: str, depth: int = 1) -> None:
        """Shallow-fetch a branch from origin."""
        validate_branch_name(branch_name)
        self._run_git_command(["fetch", self.REMOTE, branch_name, f"--depth={depth}"])

    def checkout(self, branch_name: str) -> None:
        """Check out an existing branch.

        The trailing ``--`` keeps git from reading the name as a path.
        """
        validate_branch_name(branch_name)
        self._run_git_command(["checkout", branch_name, "--"])

    def create_branch(self, branch_name: str) -> None:
        """Create ``branch_name`` at HEAD and check it out."""
        validate_branch_name(branch_name)
        self._run_git_command(["checkout", "-b", branch_name])

    def current_branch(self) -> str:
        """Return the name of the checked out branch."""
        return self._run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], mutating=False)
