"""prbranch - branch setup for GitHub issue and pull request automation."""

__version__ = "0.1.0"
