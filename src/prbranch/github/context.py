"""Event context for branch setup.

Builds the immutable :class:`EventContext` the resolver works from, either out
of a GitHub Actions environment (event payload plus ``INPUT_*`` variables) or
out of explicit arguments.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from prbranch.github.pull_requests import PullRequestDetails, fetch_pull_request

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_PREFIX = "claude/"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}

_PR_EVENTS = {
    "pull_request",
    "pull_request_target",
    "pull_request_review",
    "pull_request_review_comment",
}
_ISSUE_EVENTS = {"issues", "issue_comment"}


class ConfigurationError(Exception):
    """Invalid inputs or event payload."""

    pass


class PullRequestState(Enum):
    """State of a pull request as reported by GitHub."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"

    @classmethod
    def parse(cls, value: str) -> PullRequestState:
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ConfigurationError(f"Unknown pull request state: {value}") from None


@dataclass(frozen=True)
class EventContext:
    """Everything branch setup needs to know about the triggering event."""

    repository: str
    entity_number: int
    is_pr: bool
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    pr_state: PullRequestState | None = None
    head_ref: str | None = None
    base_ref: str | None = None
    commit_count: int = 0
    base_branch: str | None = None
    use_commit_signing: bool = False


@dataclass(frozen=True)
class ActionInputs:
    """Action inputs that shape branch setup."""

    base_branch: str | None = None
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    use_commit_signing: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> ActionInputs:
        """Read inputs the way GitHub Actions exposes them (``INPUT_<NAME>``)."""
        base_branch = environ.get("INPUT_BASE_BRANCH", "").strip() or None
        branch_prefix = environ.get("INPUT_BRANCH_PREFIX")
        if branch_prefix is None:
            branch_prefix = DEFAULT_BRANCH_PREFIX
        return cls(
            base_branch=base_branch,
            branch_prefix=branch_prefix.strip(),
            use_commit_signing=parse_bool(
                environ.get("INPUT_USE_COMMIT_SIGNING", ""), "use_commit_signing"
            ),
        )


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean action input."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def validate_repository_slug(repository: str) -> str:
    """Ensure ``repository`` has the owner/name form."""
    parts = repository.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(f"Invalid repository format: {repository!r} (expected owner/name)")
    return repository.strip()


def load_event(event_name: str, payload: Mapping[str, Any]) -> tuple[str, int, bool]:
    """Extract repository, entity number and PR flag from an event payload.

    Args:
        event_name: Value of ``GITHUB_EVENT_NAME``
        payload: Parsed event payload

    Returns:
        Tuple of (repository, entity_number, is_pr)

    Raises:
        ConfigurationError: For unsupported events or malformed payloads
    """
    try:
        repository = payload["repository"]["full_name"]
        if event_name in _ISSUE_EVENTS:
            issue = payload["issue"]
            # Comments on pull requests arrive as issue_comment events
            return repository, int(issue["number"]), "pull_request" in issue
        if event_name in _PR_EVENTS:
            return repository, int(payload["pull_request"]["number"]), True
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed {event_name} payload: missing {e}") from e

    raise ConfigurationError(f"Unsupported event: {event_name}")


def build_context(
    repository: str,
    entity_number: int,
    is_pr: bool,
    inputs: ActionInputs,
    fetch_pr: Callable[[str, int], PullRequestDetails] = fetch_pull_request,
) -> EventContext:
    """Build the event context, reading pull request details when needed."""
    repository = validate_repository_slug(repository)
    if entity_number <= 0:
        raise ConfigurationError(f"Invalid issue or pull request number: {entity_number}")

    if not is_pr:
        return EventContext(
            repository=repository,
            entity_number=entity_number,
            is_pr=False,
            branch_prefix=inputs.branch_prefix,
            base_branch=inputs.base_branch,
            use_commit_signing=inputs.use_commit_signing,
        )

    details = fetch_pr(repository, entity_number)
    return EventContext(
        repository=repository,
        entity_number=entity_number,
        is_pr=True,
        branch_prefix=inputs.branch_prefix,
        pr_state=PullRequestState.parse(details.state),
        head_ref=details.head_ref,
        base_ref=details.base_ref,
        commit_count=details.commit_count,
        base_branch=inputs.base_branch,
        use_commit_signing=inputs.use_commit_signing,
    )


def context_from_environment(
    environ: Mapping[str, str],
    fetch_pr: Callable[[str, int], PullRequestDetails] = fetch_pull_request,
    inputs: ActionInputs | None = None,
) -> EventContext:
    """Build the event context from a GitHub Actions environment."""
    event_name = environ.get("GITHUB_EVENT_NAME")
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        raise ConfigurationError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set")

    payload = read_event_payload(Path(event_path))
    repository, number, is_pr = load_event(event_name, payload)
    logger.info(f"Handling {event_name} event for {repository}#{number}")
    return build_context(
        repository, number, is_pr, inputs or ActionInputs.from_env(environ), fetch_pr
    )


def read_event_payload(event_path: Path) -> dict[str, Any]:
    """Read a GitHub event payload file."""
    try:
        with open(event_path) as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Event payload not found: {event_path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in event payload: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError("Event payload must be a JSON object")
    return payload
