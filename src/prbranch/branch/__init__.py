"""Branch resolution."""

from prbranch.branch.resolver import (
    BranchInfo,
    BranchResolver,
    NewBranch,
    OpenPullRequest,
    classify_event,
    compute_fetch_depth,
    generate_branch_name,
)

__all__ = [
    "BranchInfo",
    "BranchResolver",
    "NewBranch",
    "OpenPullRequest",
    "classify_event",
    "compute_fetch_depth",
    "generate_branch_name",
]
