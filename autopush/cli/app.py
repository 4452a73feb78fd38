from __future__ import annotations

from pathlib import Path

import typer

from autopush import __version__
from autopush.cli.prompts import PromptDecisions
from autopush.core.errors import ErrorCode
from autopush.core.result import Err, Ok
from autopush.git.repository import Repository
from autopush.output.console import RichConsole
from autopush.output.errors import print_publish_failure
from autopush.publish.bump import BREAKING_MARKERS, ChangeCategory, parse_commit_subject
from autopush.publish.config import DEFAULT_PRIMARY_BRANCH, DEFAULT_REMOTE, PublishConfig
from autopush.publish.sequencer import PublishSequencer

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _commit_answers(
    type_token: str | None, message: str | None
) -> tuple[ChangeCategory | None, str | None]:
    """Split ``--type``/``--message`` into a category and a description.

    A conventional ``--message "feat!: ..."`` without ``--type`` supplies both;
    its ``!`` becomes a BREAKING CHANGE footer so the bump sees it.
    """
    category = ChangeCategory.from_token(type_token) if type_token else None
    if message is None or category is not None:
        return category, message

    parsed = parse_commit_subject(message)
    if parsed is None:
        return None, message

    description = parsed.description
    if parsed.breaking and not any(marker in description for marker in BREAKING_MARKERS):
        description = f"{description}\n\n{BREAKING_MARKERS[0]}"
    return parsed.category, description


@app.command()
def publish(
    repo: Path = typer.Option(Path("."), "--repo", help="Working copy to publish"),
    branch: str = typer.Option(DEFAULT_PRIMARY_BRANCH, "--branch", help="Primary branch"),
    remote: str = typer.Option(DEFAULT_REMOTE, "--remote", help="Remote to sync with"),
    type_token: str | None = typer.Option(
        None, "--type", help="Commit type (feat, fix, chore, ...); prompts if omitted"
    ),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Commit description, or a full 'type: description'"
    ),
    remote_url: str | None = typer.Option(
        None, "--remote-url", help="Remote URL when a repository has to be initialized"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Commit without asking for confirmation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo git commands and publish steps"),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Sync the branch, commit pending changes, and push the next version tag."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = RichConsole()
    config = PublishConfig(primary_branch=branch, remote=remote)

    try:
        root = repo.expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --repo: {e}")
        raise typer.Exit(code=int(ErrorCode.PUBLISH_FAILED))
    if not root.is_dir():
        console.error(f"--repo '{root}' is not a directory")
        raise typer.Exit(code=int(ErrorCode.PUBLISH_FAILED))

    category, description = _commit_answers(type_token, message)
    sequencer = PublishSequencer(
        git=Repository(
            root,
            console=console if verbose else None,
            timeout=config.git_timeout_seconds,
            network_timeout=config.git_network_timeout_seconds,
        ),
        decisions=PromptDecisions(
            url=remote_url,
            category=category,
            description=description,
            assume_yes=yes,
        ),
        console=console,
        config=config,
        trace_steps=verbose,
    )

    match sequencer.run():
        case Err(failure):
            print_publish_failure(failure, console)
            raise typer.Exit(code=int(ErrorCode.PUBLISH_FAILED))
        case Ok(_):
            pass


def main() -> None:
    app()
