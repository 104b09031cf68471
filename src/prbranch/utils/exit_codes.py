"""Exit codes for prbranch."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes for branch setup."""

    SUCCESS = 0
    GENERAL_ERROR = 1  # Git or GitHub operation failed
    INVALID_CONFIG = 2  # Bad inputs or event payload
    INVALID_BRANCH_NAME = 4
    INTERRUPTED = 130
