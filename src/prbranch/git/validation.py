"""Branch name validation.

Branch names reach git as command arguments and often come from outside the
bot (pull request head refs, workflow inputs). Every name is checked against a
strict whitelist before it is used. Validation never sanitizes: a name is
either accepted as-is or rejected with a message naming the first rule it
breaks.
"""

import re

# Control characters, space and the characters git reserves for revision syntax
_FORBIDDEN_CHARS_RE = re.compile(r"[\x00-\x1f\x7f ~^:?*\[\]\\]")

# Alphanumeric start, then alphanumeric, slash, hyphen, underscore or period
_VALID_NAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9/_.-]*$")


class BranchNameError(ValueError):
    """Raised when a branch name is unsafe to pass to git."""

    pass


def validate_branch_name(branch_name: str) -> None:
    """Validate a git branch name against a strict whitelist.

    Rules are checked in a fixed order and the first violation wins:

    1. not empty or whitespace-only
    2. does not start with a dash (option injection)
    3. no control characters, spaces, or ``~^:?*[]\\``
    4. alphanumeric first character, then only ``[a-zA-Z0-9/_.-]``
    5. does not start or end with a period
    6. does not end with a slash
    7. no consecutive slashes
    8. no ``..``
    9. does not end with ``.lock``
    10. no ``@{``

    Args:
        branch_name: Name to validate

    Raises:
        BranchNameError: If the name breaks any rule
    """
    if not branch_name or not branch_name.strip():
        raise BranchNameError("Branch name cannot be empty")

    if branch_name.startswith("-"):
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names cannot start with a dash.'
        )

    if _FORBIDDEN_CHARS_RE.search(branch_name):
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names cannot contain control '
            "characters, spaces, or special git characters (~^:?*[\\])."
        )

    if not _VALID_NAME_RE.match(branch_name):
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names must start with an '
            "alphanumeric character and contain only alphanumeric characters, forward "
            "slashes, hyphens, underscores, or periods."
        )

    # Rules below overlap with the whitelist; they stay separate for their messages
    if branch_name.startswith(".") or branch_name.endswith("."):
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names cannot start or end with a period.'
        )

    if branch_name.endswith("/"):
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names cannot end with a slash.'
        )

    if "//" in branch_name:
        raise BranchNameError(
            f'Invalid branch name: "{branch_name}". Branch names cannot contain consecutive slashes.'
        )

    if ".." in branch_name:
        raise BranchNameError(
            f"Invalid branch name: \"{branch_name}\". Branch names cannot contain '..'"
        )

    if branch_name.endswith(".lock"):
        raise BranchNameError(
            f"Invalid branch name: \"{branch_name}\". Branch names cannot end with '.lock'"
        )

    if "@{" in branch_name:
        raise BranchNameError(
            f"Invalid branch name: \"{branch_name}\". Branch names cannot contain '@{{'"
        )
