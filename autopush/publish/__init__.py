"""Version derivation and the publish sequence.

- semver / bump: parse the latest tag and compute the next version
- resolver: skip versions whose tag already exists
- retry: bounded retry for pushes
- sequencer: the branch -> commit -> tag -> push state machine
"""

from __future__ import annotations

from autopush.publish.bump import ChangeCategory, bump, parse_commit_subject
from autopush.publish.config import PublishConfig
from autopush.publish.decisions import DecisionProvider, ScriptedDecisions
from autopush.publish.errors import PublishError, PublishFailure
from autopush.publish.model import CommitDecision, PublishContext, PublishSession, PublishState, Tag
from autopush.publish.resolver import resolve, resolve_against_remote
from autopush.publish.semver import INITIAL_VERSION, SemVer, parse_tag
from autopush.publish.sequencer import PublishSequencer

__all__ = [
    "INITIAL_VERSION",
    "ChangeCategory",
    "CommitDecision",
    "DecisionProvider",
    "PublishConfig",
    "PublishContext",
    "PublishError",
    "PublishFailure",
    "PublishSequencer",
    "PublishSession",
    "PublishState",
    "ScriptedDecisions",
    "SemVer",
    "Tag",
    "bump",
    "parse_commit_subject",
    "parse_tag",
    "resolve",
    "resolve_against_remote",
]
