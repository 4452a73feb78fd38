"""Shared fixtures: an in-memory git working copy for sequencer tests."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

import pytest

from autopush.core.result import Err, Ok, Result
from autopush.git.repository import GitError
from autopush.output.console import MockConsole
from autopush.publish import retry as retry_mod


@dataclass
class FakeGit:
    """Just enough git behavior to drive ``PublishSequencer``.

    ``fail`` maps an operation name to how many upcoming calls should fail
    (``-1`` for every call). ``calls`` records operations in order.
    """

    repo_exists: bool = True
    branch: str | None = "main"
    dirty: bool = False
    subject: str | None = None
    latest: str | None = None
    local_tags: set[str] = field(default_factory=set)
    remote_tags: set[str] = field(default_factory=set)
    remote_branches: set[str] = field(default_factory=lambda: {"main"})
    fail: dict[str, int] = field(default_factory=dict)

    calls: list[str] = field(default_factory=list)
    pushes: list[tuple[str, bool]] = field(default_factory=list)
    tags_created: list[tuple[str, str]] = field(default_factory=list)
    commits: list[str] = field(default_factory=list)
    stash_stack: list[bool] = field(default_factory=list)
    remotes: dict[str, str] = field(default_factory=dict)
    attempts: Counter[str] = field(default_factory=Counter)

    def _should_fail(self, op: str) -> bool:
        self.attempts[op] += 1
        remaining = self.fail.get(op, 0)
        if remaining == 0:
            return False
        if remaining > 0:
            self.fail[op] = remaining - 1
        return True

    def _result(self, op: str) -> Result[None, GitError]:
        self.calls.append(op)
        if self._should_fail(op):
            return Err(GitError(command=op, message=f"{op} exploded"))
        return Ok(None)

    def exists(self) -> bool:
        return self.repo_exists

    def init(self) -> Result[None, GitError]:
        result = self._result("init")
        if isinstance(result, Ok):
            self.repo_exists = True
            self.branch = "master"
        return result

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        result = self._result("add_remote")
        if isinstance(result, Ok):
            self.remotes[name] = url
        return result

    def create_branch(self, name: str) -> Result[None, GitError]:
        result = self._result(f"create_branch {name}")
        if isinstance(result, Ok):
            self.branch = name
        return result

    def current_branch(self) -> str | None:
        return self.branch

    def is_working_tree_dirty(self) -> bool:
        return self.dirty

    def head_subject(self) -> str | None:
        return self.subject

    def stage_all(self) -> Result[None, GitError]:
        return self._result("stage_all")

    def commit(self, message: str) -> Result[None, GitError]:
        result = self._result("commit")
        if isinstance(result, Ok):
            self.commits.append(message)
            self.subject = message
            self.dirty = False
        return result

    def checkout(self, branch: str) -> Result[None, GitError]:
        result = self._result(f"checkout {branch}")
        if isinstance(result, Ok):
            self.branch = branch
        return result

    def stash(self) -> Result[None, GitError]:
        result = self._result("stash")
        if isinstance(result, Ok):
            self.stash_stack.append(self.dirty)
            self.dirty = False
        return result

    def stash_pop(self) -> Result[None, GitError]:
        result = self._result("stash_pop")
        if isinstance(result, Ok):
            self.dirty = self.stash_stack.pop()
        return result

    def pull_ff(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._result(f"pull {remote} {branch}")

    def remote_branch_exists(self, remote: str, branch: str) -> Result[bool, GitError]:
        self.calls.append(f"ls-remote {branch}")
        if self._should_fail("ls-remote"):
            return Err(GitError(command="ls-remote", message="ls-remote exploded"))
        return Ok(branch in self.remote_branches)

    def push(self, remote: str, ref: str, *, set_upstream: bool = False) -> Result[None, GitError]:
        result = self._result(f"push {ref}")
        if isinstance(result, Ok):
            self.pushes.append((ref, set_upstream))
            if set_upstream:
                self.remote_branches.add(ref)
        return result

    def fetch_tags(self, remote: str) -> Result[None, GitError]:
        result = self._result("fetch_tags")
        if isinstance(result, Ok):
            self.local_tags |= self.remote_tags
        return result

    def tag_exists(self, name: str) -> bool:
        self.calls.append(f"tag_exists {name}")
        return name in self.local_tags

    def latest_tag(self, ref: str | None = None) -> str | None:
        self.calls.append(f"latest_tag {ref}")
        return self.latest

    def create_tag(self, name: str, message: str) -> Result[None, GitError]:
        result = self._result(f"tag {name}")
        if isinstance(result, Ok):
            self.tags_created.append((name, message))
            self.local_tags.add(name)
        return result


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace the retry delay with a recorder."""
    slept: list[float] = []
    monkeypatch.setattr(retry_mod, "sleep", slept.append)
    return slept


@pytest.fixture
def make_git() -> type[FakeGit]:
    """The FakeGit class itself, for tests that need non-default state."""
    return FakeGit
