from __future__ import annotations

from dataclasses import dataclass

from autopush.git.repository import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS
from autopush.publish.semver import INITIAL_VERSION, SemVer

DEFAULT_PRIMARY_BRANCH = "main"
DEFAULT_REMOTE = "origin"
DEFAULT_TAG_PREFIX = "v"

# Pushes are the only retried operation; branch and tag pushes each get
# their own budget.
PUSH_RETRY_ATTEMPTS = 3
PUSH_RETRY_DELAY_SECONDS = 2.0

INITIAL_COMMIT_MESSAGE = "Initial commit"


@dataclass(frozen=True, slots=True)
class PublishConfig:
    primary_branch: str = DEFAULT_PRIMARY_BRANCH
    remote: str = DEFAULT_REMOTE
    tag_prefix: str = DEFAULT_TAG_PREFIX
    initial_version: SemVer = INITIAL_VERSION
    push_attempts: int = PUSH_RETRY_ATTEMPTS
    push_delay_seconds: float = PUSH_RETRY_DELAY_SECONDS
    git_timeout_seconds: float = GIT_TIMEOUT_SECONDS
    git_network_timeout_seconds: float = GIT_NETWORK_TIMEOUT_SECONDS

    def tag_name(self, version: SemVer) -> str:
        return version.to_tag(self.tag_prefix)
