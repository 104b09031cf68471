"""GitHub repository metadata via gh CLI."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Repository operation related errors."""

    pass


class RepositoryMetadataFetcher:
    """Reads repository metadata from GitHub using the gh CLI.

    Only two reads are needed for branch setup: the repository's default
    branch and the commit a branch ref points at.
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: float | None = None,
    ):
        """Initialize the fetcher.

        Args:
            runner: Callable with the signature of ``subprocess.run``
            timeout: Timeout in seconds for each gh call
        """
        self._runner = runner
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    def get_default_branch(self, repo: str) -> str:
        """Get the default branch for a repository.

        Args:
            repo: Repository in format owner/name

        Returns:
            Default branch name (e.g., 'main', 'master')

        Raises:
            RepositoryError: If fetching metadata fails
        """
        data = self._gh_json(["repo", "view", repo, "--json", "defaultBranchRef"])
        branch_ref = data.get("defaultBranchRef") or {}
        default_branch = branch_ref.get("name") if isinstance(branch_ref, dict) else None
        if not default_branch:
            raise RepositoryError(f"No default branch reported for {repo}")

        logger.info(f"Default branch for {repo}: {default_branch}")
        return default_branch

    def get_ref_sha(self, repo: str, ref: str) -> str:
        """Get the commit SHA a git ref points at.

        Args:
            repo: Repository in format owner/name
            ref: Ref relative to ``refs/``, e.g. ``heads/main``

        Returns:
            Commit SHA

        Raises:
            RepositoryError: If the ref does not exist or the lookup fails
        """
        data = self._gh_json(["api", f"repos/{repo}/git/ref/{ref}"])
        ref_object = data.get("object") or {}
        sha = ref_object.get("sha") if isinstance(ref_object, dict) else None
        if not sha:
            raise RepositoryError(f"Ref {ref} not found in {repo}")
        return sha

    def _gh_json(self, args: list[str]) -> dict[str, Any]:
        """Run a gh command and parse its JSON output.

        Raises:
            RepositoryError: If gh fails, is missing, or returns invalid JSON
        """
        cmd = ["gh"] + args
        logger.debug(f"Running command: {' '.join(cmd)}")

        try:
            result = self._runner(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr.strip() if e.stderr else str(e)
            raise RepositoryError(f"GitHub request failed: {error_msg}") from e
        except subprocess.TimeoutExpired:
            raise RepositoryError(f"Timeout running: {' '.join(cmd)}") from None
        except FileNotFoundError:
            raise RepositoryError("GitHub CLI (gh) not found") from None

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Failed to parse GitHub response: {e}") from e

        if not isinstance(data, dict):
            raise RepositoryError(f"Unexpected GitHub response: {result.stdout[:200]}")
        return data
