"""Pull request details via gh CLI."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from prbranch.github.repository import RepositoryError

logger = logging.getLogger(__name__)

_PR_FIELDS = "state,headRefName,baseRefName,commits"


@dataclass(frozen=True)
class PullRequestDetails:
    """The pull request fields branch setup depends on."""

    number: int
    state: str
    head_ref: str
    base_ref: str
    commit_count: int


def fetch_pull_request(
    repo: str,
    number: int,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> PullRequestDetails:
    """Fetch state, refs and commit count of a pull request.

    Args:
        repo: Repository in format owner/name
        number: Pull request number
        runner: Callable with the signature of ``subprocess.run``

    Raises:
        RepositoryError: If the pull request cannot be read
    """
    cmd = ["gh", "pr", "view", str(number), "--repo", repo, "--json", _PR_FIELDS]
    logger.debug(f"Running command: {' '.join(cmd)}")

    try:
        result = runner(cmd, capture_output=True, text=True, timeout=30, check=True)
        data = json.loads(result.stdout)
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr.strip() if e.stderr else str(e)
        raise RepositoryError(f"Failed to fetch pull request #{number}: {error_msg}") from e
    except subprocess.TimeoutExpired:
        raise RepositoryError(f"Timeout fetching pull request #{number}") from None
    except FileNotFoundError:
        raise RepositoryError("GitHub CLI (gh) not found") from None
    except json.JSONDecodeError as e:
        raise RepositoryError(f"Failed to parse pull request response: {e}") from e

    try:
        details = PullRequestDetails(
            number=number,
            state=str(data["state"]).upper(),
            head_ref=data["headRefName"],
            base_ref=data["baseRefName"],
            commit_count=len(data.get("commits") or []),
        )
    except (KeyError, TypeError) as e:
        raise RepositoryError(f"Incomplete pull request data for #{number}: {e}") from e

    logger.info(
        f"PR #{number} is {details.state}: {details.head_ref} -> {details.base_ref} "
        f"({details.commit_count} commits)"
    )
    return details
