"""Utility modules for prbranch."""

from prbranch.utils.exit_codes import ExitCode
from prbranch.utils.logging import setup_logging

__all__ = ["ExitCode", "setup_logging"]
