"""GitHub integration via the gh CLI and the Actions environment."""

from prbranch.github.context import (
    ActionInputs,
    ConfigurationError,
    EventContext,
    PullRequestState,
    build_context,
    context_from_environment,
)
from prbranch.github.outputs import set_output
from prbranch.github.pull_requests import PullRequestDetails, fetch_pull_request
from prbranch.github.repository import RepositoryError, RepositoryMetadataFetcher

__all__ = [
    "ActionInputs",
    "ConfigurationError",
    "EventContext",
    "PullRequestDetails",
    "PullRequestState",
    "RepositoryError",
    "RepositoryMetadataFetcher",
    "build_context",
    "context_from_environment",
    "fetch_pull_request",
    "set_output",
]
