"""Collaborator interfaces used by the publish sequencer.

``autopush.git.Repository`` satisfies ``GitOperations`` structurally; tests
provide an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol

from autopush.core.result import Result
from autopush.git.repository import GitError


class GitOperations(Protocol):
    def exists(self) -> bool: ...

    def init(self) -> Result[None, GitError]: ...

    def add_remote(self, name: str, url: str) -> Result[None, GitError]: ...

    def create_branch(self, name: str) -> Result[None, GitError]: ...

    def current_branch(self) -> str | None: ...

    def is_working_tree_dirty(self) -> bool: ...

    def head_subject(self) -> str | None: ...

    def stage_all(self) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[None, GitError]: ...

    def checkout(self, branch: str) -> Result[None, GitError]: ...

    def stash(self) -> Result[None, GitError]: ...

    def stash_pop(self) -> Result[None, GitError]: ...

    def pull_ff(self, remote: str, branch: str) -> Result[None, GitError]: ...

    def remote_branch_exists(self, remote: str, branch: str) -> Result[bool, GitError]: ...

    def push(
        self, remote: str, ref: str, *, set_upstream: bool = False
    ) -> Result[None, GitError]: ...

    def fetch_tags(self, remote: str) -> Result[None, GitError]: ...

    def tag_exists(self, name: str) -> bool: ...

    def latest_tag(self, ref: str | None = None) -> str | None: ...

    def create_tag(self, name: str, message: str) -> Result[None, GitError]: ...
