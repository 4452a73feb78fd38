from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PublishErrorKind = Literal[
    "repository_init",
    "remote_configuration",
    "branch_sync",
    "commit",
    "malformed_tag",
    "push_exhausted",
    "tag_creation",
    "invalid_step",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    """Why a publish step failed.

    ``message`` names the failed action ("Failed to tag the commit."),
    ``hint`` carries git's own output or a follow-up suggestion.
    """

    kind: PublishErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


@dataclass(frozen=True, slots=True)
class PublishFailure:
    """Terminal ``failed`` state: the step that was running and its error."""

    step: str
    error: PublishError
