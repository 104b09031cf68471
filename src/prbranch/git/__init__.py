"""Git operations module."""

from prbranch.git.validation import BranchNameError, validate_branch_name
from prbranch.git.working_copy import GitCommandError, WorkingCopy

__all__ = [
    "BranchNameError",
    "GitCommandError",
    "WorkingCopy",
    "validate_branch_name",
]
