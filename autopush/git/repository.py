"""Git working-copy abstraction.

``Repository`` wraps the handful of git commands a publish run needs. Commands
that can fail return ``Result`` values; pure queries (current branch, dirty
check, tag lookups) answer directly and treat git errors as "unknown".

Usage:
    repo = Repository(Path.cwd())

    match repo.pull_ff("origin", "main"):
        case Ok(_):
            print("main is up to date")
        case Err(e):
            print(f"pull failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autopush.core.result import Err, Ok, Result
from autopush.output.console import ConsoleProtocol, Style
from autopush.platform.process import ProcessError
from autopush.platform.process import run as run_process

GIT_TIMEOUT_SECONDS = 30.0
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "ls-remote", "clone"})

__all__ = [
    "GIT_NETWORK_TIMEOUT_SECONDS",
    "GIT_TIMEOUT_SECONDS",
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "pull --ff-only")
        message: stderr/stdout of the failed command, or a fallback text
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A single git working copy.

    Args:
        path: Repository root (the directory that holds, or will hold, .git)
        console: When given, every git command is echoed before it runs.
        timeout: Timeout for local git commands.
        network_timeout: Timeout for fetch/pull/push/ls-remote.
    """

    def __init__(
        self,
        path: Path,
        *,
        console: ConsoleProtocol | None = None,
        timeout: float = GIT_TIMEOUT_SECONDS,
        network_timeout: float = GIT_NETWORK_TIMEOUT_SECONDS,
    ) -> None:
        self.path = path
        self._console = console
        self._timeout = timeout
        self._network_timeout = network_timeout

    # -- queries ---------------------------------------------------------

    def exists(self) -> bool:
        """True if ``path`` holds a .git directory (or a worktree .git file)."""
        return (self.path / ".git").exists()

    def current_branch(self) -> str | None:
        """Current branch name, None on detached HEAD or error."""
        result = self._run(["branch", "--show-current"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return branch or None
            case Err(_):
                return None

    def is_working_tree_dirty(self) -> bool:
        """True if there are staged, unstaged or untracked changes.

        An unreadable status counts as dirty, so callers err towards stashing.
        """
        result = self._run(["status", "--porcelain"])
        match result:
            case Ok(stdout):
                return stdout.strip() != ""
            case Err(_):
                return True

    def head_subject(self) -> str | None:
        """Subject line of the HEAD commit, None when there is no commit."""
        result = self._run(["log", "-1", "--format=%s"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def latest_tag(self, ref: str | None = None) -> str | None:
        """Most recent tag reachable from ``ref`` (HEAD by default)."""
        args = ["describe", "--tags", "--abbrev=0"]
        if ref is not None:
            args.append(ref)
        result = self._run(args)
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def tag_exists(self, name: str) -> bool:
        """True if ``refs/tags/<name>`` exists locally."""
        result = self._run(["rev-parse", "-q", "--verify", f"refs/tags/{name}"])
        return isinstance(result, Ok)

    def remote_branch_exists(self, remote: str, branch: str) -> Result[bool, GitError]:
        """Ask the remote whether ``branch`` exists there.

        ``git ls-remote --exit-code`` exits 2 when nothing matches; any other
        failure is a real error (unreachable remote, bad URL).
        """
        result = self._run(["ls-remote", "--exit-code", "--heads", remote, branch])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 2:
                return Ok(False)
            case Err(e):
                return Err(_git_error("ls-remote", e, "ls-remote failed"))

    # -- bootstrap -------------------------------------------------------

    def init(self) -> Result[None, GitError]:
        return self._simple(["init"], "git init failed")

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        return self._simple(["remote", "add", name, url], f"failed to add remote {name}")

    def create_branch(self, name: str) -> Result[None, GitError]:
        """Create ``name`` and switch to it (``checkout -b``)."""
        return self._simple(["checkout", "-b", name], f"failed to create branch {name}")

    # -- working tree ----------------------------------------------------

    def stage_all(self) -> Result[None, GitError]:
        return self._simple(["add", "-A"], "git add failed")

    def commit(self, message: str) -> Result[None, GitError]:
        return self._simple(["commit", "-m", message], "git commit failed")

    def checkout(self, branch: str) -> Result[None, GitError]:
        return self._simple(["checkout", branch], f"failed to checkout {branch}")

    def stash(self) -> Result[None, GitError]:
        """Stash tracked and untracked changes."""
        return self._simple(["stash", "push", "--include-untracked"], "git stash failed")

    def stash_pop(self) -> Result[None, GitError]:
        return self._simple(["stash", "pop"], "git stash pop failed")

    # -- remote ----------------------------------------------------------

    def pull_ff(self, remote: str, branch: str) -> Result[None, GitError]:
        """Fast-forward the current branch from ``remote/branch``."""
        return self._simple(["pull", "--ff-only", remote, branch], f"failed to pull {branch}")

    def fetch_tags(self, remote: str) -> Result[None, GitError]:
        return self._simple(["fetch", "--tags", remote], "git fetch --tags failed")

    def push(self, remote: str, ref: str, *, set_upstream: bool = False) -> Result[None, GitError]:
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        args.extend([remote, ref])
        return self._simple(args, f"failed to push {ref}")

    # -- tags ------------------------------------------------------------

    def create_tag(self, name: str, message: str) -> Result[None, GitError]:
        """Create an annotated tag on HEAD."""
        return self._simple(["tag", "-a", name, "-m", message], f"failed to create tag {name}")

    # -- internals -------------------------------------------------------

    def _simple(self, args: list[str], fallback: str) -> Result[None, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(" ".join(args[:2]), e, fallback))
            case Ok(_):
                return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = self._network_timeout if command in _NETWORK_COMMANDS else self._timeout
        if self._console is not None:
            self._console.print(f"$ git {' '.join(args)}", Style.DIM)
        return run_process(["git", *args], cwd=self.path, timeout=timeout)


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.detail or fallback,
        returncode=error.returncode,
    )
