from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from autopush.publish.bump import ChangeCategory
from autopush.publish.semver import SemVer


class PublishState(StrEnum):
    INIT = "init"
    BRANCH_ENSURED = "branch_ensured"
    CLASSIFIED = "classified"
    BUMPED = "bumped"
    RESOLVED = "resolved"
    TAGGED = "tagged"
    PUSHED = "pushed"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PublishContext:
    """Branch state captured while ensuring the branch; lives for one run."""

    current_branch: str
    is_main_branch: bool
    working_tree_dirty: bool
    stash_taken: bool = False


@dataclass(frozen=True, slots=True)
class CommitDecision:
    category: ChangeCategory
    description: str
    breaking: bool
    committed: bool

    @property
    def message(self) -> str:
        return f"{self.category.value}: {self.description}"


@dataclass(frozen=True, slots=True)
class Tag:
    name: str
    version: SemVer
    message: str

    @classmethod
    def release(cls, version: SemVer, *, prefix: str = "v") -> Tag:
        name = version.to_tag(prefix)
        return cls(name=name, version=version, message=f"Release {name}")


@dataclass(frozen=True, slots=True)
class PublishSession:
    """Everything one run has established so far.

    Steps never mutate a session; they hand the next step a copy with the
    fields they produced filled in.
    """

    state: PublishState = PublishState.INIT
    context: PublishContext | None = None
    decision: CommitDecision | None = None
    base: SemVer | None = None
    candidate: SemVer | None = None
    resolved: SemVer | None = None
    tag: Tag | None = None
    upstream_pending: bool = False
