"""gyst - AI-assisted commit messages and branch health for git repositories."""

__version__ = "0.1.2"
