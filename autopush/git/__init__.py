"""Git operations.

Usage:
    from autopush.git import Repository

    repo = Repository(Path.cwd())
    if repo.is_working_tree_dirty():
        repo.stash()
"""

from autopush.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
