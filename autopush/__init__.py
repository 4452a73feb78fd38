"""autopush - sync, commit and tag a git working copy in one step."""

__version__ = "0.1.0"
