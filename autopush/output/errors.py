"""Failure presentation for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from autopush.output.console import Style
from autopush.publish.errors import PublishFailure

if TYPE_CHECKING:
    from autopush.output.console import ConsoleProtocol

__all__ = ["print_publish_failure"]

_HINTS = {
    "repository_init": "Check that the directory is writable and git is installed.",
    "remote_configuration": "Check the remote URL and your network access.",
    "branch_sync": "Resolve the branch state manually (git status, git stash list).",
    "commit": "Configure git user.name/user.email, then retry.",
    "malformed_tag": "Tag the latest release as vMAJOR.MINOR.PATCH.",
    "push_exhausted": "Check credentials and connectivity, then rerun.",
    "tag_creation": None,
    "invalid_step": None,
}


def print_publish_failure(failure: PublishFailure, console: ConsoleProtocol) -> None:
    """Print the failed action, git's own output, and a follow-up hint."""
    error = failure.error
    console.error(error.message)
    if error.hint:
        console.print(error.hint, Style.DIM)
    follow_up = _HINTS.get(error.kind)
    if follow_up:
        console.print(f"hint: {follow_up}", Style.DIM)
    console.print(f"stopped at step: {failure.step}", Style.DIM)
    if error.kind == "push_exhausted":
        console.warning("refs pushed earlier in this run were not reverted")
