from __future__ import annotations

from collections.abc import Callable

from autopush.core.result import Err, Ok, Result
from autopush.publish.errors import PublishError
from autopush.publish.ports import GitOperations
from autopush.publish.semver import SemVer


def resolve(candidate: SemVer, exists: Callable[[SemVer], bool]) -> SemVer:
    """First version at or after ``candidate`` that ``exists`` rejects.

    Collisions always move the patch number, even when ``candidate`` came
    from a major or minor bump.
    """
    current = candidate
    while exists(current):
        current = current.next_patch()
    return current


def resolve_against_remote(
    candidate: SemVer,
    *,
    git: GitOperations,
    remote: str,
    tag_prefix: str = "v",
) -> Result[SemVer, PublishError]:
    """Refresh tags from ``remote`` once, then resolve against local tag refs."""
    fetched = git.fetch_tags(remote)
    if isinstance(fetched, Err):
        return Err(
            PublishError(
                kind="remote_configuration",
                message=f"Failed to fetch tags from {remote}",
                hint=fetched.error.message,
            )
        )

    return Ok(resolve(candidate, lambda v: git.tag_exists(v.to_tag(tag_prefix))))
