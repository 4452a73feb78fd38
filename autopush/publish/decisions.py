"""Answers the publish run needs from a person.

The sequencer asks through ``DecisionProvider``; the CLI answers with
prompts, tests and non-interactive runs use ``ScriptedDecisions``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from autopush.publish.bump import ChangeCategory


class DecisionProvider(Protocol):
    def remote_url(self) -> str:
        """URL for the remote added when bootstrapping a new repository."""
        ...

    def confirm(self, message: str) -> bool: ...

    def choose_category(self) -> ChangeCategory: ...

    def describe_change(self) -> str: ...


class MissingAnswer(LookupError):
    """A scripted run was asked something it has no answer for."""


def _empty_questions() -> list[str]:
    return []


@dataclass
class ScriptedDecisions:
    """Fixed answers. Unanswered questions raise ``MissingAnswer``."""

    url: str | None = None
    category: ChangeCategory | None = None
    description: str | None = None
    confirmed: bool = True
    asked: list[str] = field(default_factory=_empty_questions)

    def remote_url(self) -> str:
        self.asked.append("remote_url")
        if self.url is None:
            raise MissingAnswer("remote URL")
        return self.url

    def confirm(self, message: str) -> bool:
        self.asked.append(f"confirm:{message}")
        return self.confirmed

    def choose_category(self) -> ChangeCategory:
        self.asked.append("choose_category")
        if self.category is None:
            raise MissingAnswer("commit category")
        return self.category

    def describe_change(self) -> str:
        self.asked.append("describe_change")
        if self.description is None:
            raise MissingAnswer("change description")
        return self.description
