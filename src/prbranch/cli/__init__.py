"""CLI commands for prbranch."""

from prbranch.cli.setup import setup_command
from prbranch.cli.validate import validate_command

__all__ = ["setup_command", "validate_command"]
