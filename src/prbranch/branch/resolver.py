"""Branch resolution for issue and pull request events.

An event resolves to one of two states:

- :class:`OpenPullRequest`: work happens on the PR's head branch, which is
  fetched through ``refs/pull/<n>/head`` and checked out locally.
- :class:`NewBranch`: issues and closed or merged PRs get a fresh branch named
  ``{prefix}{pr|issue}-{number}-{YYYYMMDD-HHmm}`` cut from a source branch. In
  commit-signing mode the branch is only named here; it is created later by
  whatever produces the signed commit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from prbranch.git.validation import validate_branch_name
from prbranch.git.working_copy import WorkingCopy
from prbranch.github.context import ConfigurationError, EventContext, PullRequestState
from prbranch.github.outputs import set_output

logger = logging.getLogger(__name__)

MIN_FETCH_DEPTH = 20
MAX_BRANCH_NAME_LENGTH = 50


class MetadataProvider(Protocol):
    def get_default_branch(self, repo: str) -> str: ...

    def get_ref_sha(self, repo: str, ref: str) -> str: ...


@dataclass(frozen=True)
class BranchInfo:
    """Checkout state after branch setup."""

    base_branch: str
    current_branch: str
    claude_branch: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "baseBranch": self.base_branch,
            "claudeBranch": self.claude_branch,
            "currentBranch": self.current_branch,
        }


@dataclass(frozen=True)
class OpenPullRequest:
    """Check out the head branch of an open pull request."""

    head_ref: str
    base_ref: str
    fetch_depth: int


@dataclass(frozen=True)
class NewBranch:
    """Cut a new branch for an issue or a closed/merged pull request."""

    entity_type: str


ResolutionState = OpenPullRequest | NewBranch


def compute_fetch_depth(commit_count: int) -> int:
    """Fetch at least MIN_FETCH_DEPTH commits, more for longer PRs."""
    return max(commit_count, MIN_FETCH_DEPTH)


def classify_event(context: EventContext) -> ResolutionState:
    """Decide how branch setup proceeds for an event."""
    if context.is_pr and context.pr_state not in (
        PullRequestState.CLOSED,
        PullRequestState.MERGED,
    ):
        if not context.head_ref or not context.base_ref:
            raise ConfigurationError(f"PR #{context.entity_number} is missing head or base ref")
        return OpenPullRequest(
            head_ref=context.head_ref,
            base_ref=context.base_ref,
            fetch_depth=compute_fetch_depth(context.commit_count),
        )

    if context.is_pr:
        logger.info(
            f"PR #{context.entity_number} is {context.pr_state.value}, "
            "creating new branch from source..."
        )
    return NewBranch(entity_type="pr" if context.is_pr else "issue")


def generate_branch_name(prefix: str, entity_type: str, entity_number: int, now: datetime) -> str:
    """Build the name of a new work branch.

    The result is lowercase and at most MAX_BRANCH_NAME_LENGTH characters so
    it can double as a label in orchestration systems with those limits.
    Timestamps have minute granularity, so repeated calls within one minute
    yield the same name.
    """
    timestamp = now.strftime("%Y%m%d-%H%M")
    branch_name = f"{prefix}{entity_type}-{entity_number}-{timestamp}"
    return branch_name.lower()[:MAX_BRANCH_NAME_LENGTH]


class BranchResolver:
    """Prepares a working copy for the event being handled."""

    def __init__(
        self,
        working_copy: WorkingCopy,
        metadata: MetadataProvider,
        clock: Callable[[], datetime] = datetime.now,
        publish: Callable[[str, str], None] = set_output,
    ):
        """Initialize the resolver.

        Args:
            working_copy: Checkout to operate on
            metadata: Source of default branch and ref lookups
            clock: Returns the local time used in generated branch names
            publish: Publishes step outputs
        """
        self.working_copy = working_copy
        self.metadata = metadata
        self.clock = clock
        self.publish = publish

    def setup(self, context: EventContext) -> BranchInfo:
        """Resolve and check out the branch for ``context``.

        Errors are logged and re-raised; nothing is retried.

        Raises:
            ConfigurationError: If an open PR lacks its head or base ref
            BranchNameError: If any branch name fails validation
            GitCommandError: If a git command fails
            RepositoryError: If a GitHub lookup fails
        """
        try:
            state = classify_event(context)
            if isinstance(state, OpenPullRequest):
                return self._checkout_pull_request(context, state)
            return self._create_branch(context, state)
        except Exception as e:
            logger.error(f"Error in branch setup: {e}")
            raise

    def _checkout_pull_request(self, context: EventContext, state: OpenPullRequest) -> BranchInfo:
        number = context.entity_number
        logger.info("This is an open PR, checking out PR branch...")
        logger.info(
            f"PR #{number}: {context.commit_count} commits, using fetch depth {state.fetch_depth}"
        )

        validate_branch_name(state.head_ref)

        logger.info("Fetching PR using GitHub PR refs to handle forked repositories...")
        self.working_copy.fetch_pull_request(number, state.fetch_depth)
        self.working_copy.force_checkout_fetch_head(state.head_ref)
        logger.info(f"Successfully checked out PR branch for PR #{number}")

        validate_branch_name(state.base_ref)
        return BranchInfo(base_branch=state.base_ref, current_branch=state.head_ref)

    def _create_branch(self, context: EventContext, state: NewBranch) -> BranchInfo:
        if context.base_branch:
            source_branch = context.base_branch
        else:
            source_branch = self.metadata.get_default_branch(context.repository)

        new_branch = generate_branch_name(
            context.branch_prefix, state.entity_type, context.entity_number, self.clock()
        )

        validate_branch_name(source_branch)
        sha = self.metadata.get_ref_sha(context.repository, f"heads/{source_branch}")
        logger.info(f"Source branch SHA: {sha}")

        validate_branch_name(new_branch)

        if context.use_commit_signing:
            logger.info(
                f"Branch name generated: {new_branch} "
                "(will be created with the first signed commit)"
            )
            current_branch = source_branch
        else:
            logger.info(
                f"Creating local branch {new_branch} for {state.entity_type} "
                f"#{context.entity_number} from source branch: {source_branch}..."
            )
            current_branch = new_branch

        logger.info(f"Fetching and checking out source branch: {source_branch}")
        self.working_copy.fetch_branch(source_branch, depth=1)
        self.working_copy.checkout(source_branch)

        if not context.use_commit_signing:
            self.working_copy.create_branch(new_branch)
            logger.info(f"Successfully created and checked out local branch: {new_branch}")

        self.publish("CLAUDE_BRANCH", new_branch)
        self.publish("BASE_BRANCH", source_branch)
        return BranchInfo(
            base_branch=source_branch,
            claude_branch=new_branch,
            current_branch=current_branch,
        )
