from __future__ import annotations

import typer

from autopush.publish.bump import ChangeCategory

_CATEGORY_CHOICES = ", ".join(c.value for c in ChangeCategory if c is not ChangeCategory.OTHER)


class PromptDecisions:
    """Answers questions from the terminal unless pre-answered on the command line.

    Args:
        url: Remote URL for a freshly initialized repository.
        category: Commit category (``--type``).
        description: Commit description (``--message``).
        assume_yes: Skip the confirmation before committing.
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        category: ChangeCategory | None = None,
        description: str | None = None,
        assume_yes: bool = False,
    ) -> None:
        self._url = url
        self._category = category
        self._description = description
        self._assume_yes = assume_yes

    def remote_url(self) -> str:
        if self._url is not None:
            return self._url
        return typer.prompt(
            "Enter the remote repository URL (e.g., https://github.com/user/repo.git)"
        )

    def confirm(self, message: str) -> bool:
        if self._assume_yes:
            return True
        return typer.confirm(message, default=True)

    def choose_category(self) -> ChangeCategory:
        if self._category is not None:
            return self._category
        token = typer.prompt(f"Commit type ({_CATEGORY_CHOICES})", default="fix")
        return ChangeCategory.from_token(token)

    def describe_change(self) -> str:
        if self._description is not None:
            return self._description
        return typer.prompt("Describe the change (add BREAKING CHANGE for a major bump)")
