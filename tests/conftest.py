"""Shared pytest fixtures."""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from prbranch.github.context import EventContext, PullRequestState


def _git(*args: str, cwd: Path) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)
    return result.stdout.strip()


def _configure_identity(repo_path: Path) -> None:
    _git("config", "user.email", "test@example.com", cwd=repo_path)
    _git("config", "user.name", "Test User", cwd=repo_path)
    _git("config", "commit.gpgsign", "false", cwd=repo_path)


@pytest.fixture
def git_origin(tmp_path):
    """Create a bare origin with main and develop branches and a pull ref for PR #3.

    Returns:
        Tuple of (origin_url, seed_path)
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    origin = tmp_path / "origin.git"
    _git("init", "--bare", str(origin), cwd=tmp_path)
    _git("symbolic-ref", "HEAD", "refs/heads/main", cwd=origin)
    origin_url = origin.as_uri()

    seed = tmp_path / "seed"
    seed.mkdir()
    _git("init", cwd=seed)
    _configure_identity(seed)
    _git("symbolic-ref", "HEAD", "refs/heads/main", cwd=seed)
    (seed / "README.md").write_text("# Test Repository\n")
    _git("add", ".", cwd=seed)
    _git("commit", "-m", "Initial commit", cwd=seed)
    _git("remote", "add", "origin", origin_url, cwd=seed)
    _git("push", "origin", "main", cwd=seed)

    _git("checkout", "-b", "develop", cwd=seed)
    (seed / "develop.txt").write_text("develop\n")
    _git("add", ".", cwd=seed)
    _git("commit", "-m", "Start develop", cwd=seed)
    _git("push", "origin", "develop", cwd=seed)
    _git("checkout", "main", cwd=seed)

    # A PR head that only exists as a pull ref, as it would for a fork
    _git("checkout", "-b", "feature/pr-3", cwd=seed)
    (seed / "feature.txt").write_text("feature\n")
    _git("add", ".", cwd=seed)
    _git("commit", "-m", "Add feature", cwd=seed)
    _git("push", "origin", "HEAD:refs/pull/3/head", cwd=seed)

    return origin_url, seed


@pytest.fixture
def working_copy_path(tmp_path, git_origin):
    """Clone the origin into a fresh checkout."""
    origin_url, _seed = git_origin
    clone = tmp_path / "work"
    _git("clone", origin_url, str(clone), cwd=tmp_path)
    _configure_identity(clone)
    return clone


@pytest.fixture
def mock_metadata():
    """Metadata provider reporting main as default branch."""
    metadata = Mock()
    metadata.get_default_branch.return_value = "main"
    metadata.get_ref_sha.return_value = "abc123def456"
    return metadata


@pytest.fixture
def issue_context():
    """Context for issue #7."""
    return EventContext(
        repository="octocat/hello-world",
        entity_number=7,
        is_pr=False,
        branch_prefix="bot-",
    )


@pytest.fixture
def open_pr_context():
    """Context for an open PR #42."""
    return EventContext(
        repository="octocat/hello-world",
        entity_number=42,
        is_pr=True,
        branch_prefix="bot-",
        pr_state=PullRequestState.OPEN,
        head_ref="pr-42",
        base_ref="main",
        commit_count=5,
    )


@pytest.fixture
def mock_subprocess_run():
    """Mock subprocess.run for testing command execution."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        yield mock_run
