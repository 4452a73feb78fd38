from __future__ import annotations

import pytest

from autopush.publish.bump import ChangeCategory
from autopush.publish.decisions import MissingAnswer, ScriptedDecisions
from autopush.publish.model import CommitDecision, Tag
from autopush.publish.semver import SemVer


class TestScriptedDecisions:
    def test_answers_and_records(self) -> None:
        decisions = ScriptedDecisions(
            url="https://example.com/r.git",
            category=ChangeCategory.FIX,
            description="typo",
        )

        assert decisions.remote_url() == "https://example.com/r.git"
        assert decisions.confirm("Commit pending changes?") is True
        assert decisions.choose_category() is ChangeCategory.FIX
        assert decisions.describe_change() == "typo"
        assert decisions.asked == [
            "remote_url",
            "confirm:Commit pending changes?",
            "choose_category",
            "describe_change",
        ]

    def test_missing_answer(self) -> None:
        with pytest.raises(MissingAnswer):
            ScriptedDecisions().choose_category()


class TestModel:
    def test_commit_message(self) -> None:
        decision = CommitDecision(
            category=ChangeCategory.REFACTOR,
            description="split sequencer",
            breaking=False,
            committed=True,
        )
        assert decision.message == "refactor: split sequencer"

    def test_release_tag(self) -> None:
        tag = Tag.release(SemVer(1, 2, 0))
        assert tag.name == "v1.2.0"
        assert tag.message == "Release v1.2.0"
        assert tag.version == SemVer(1, 2, 0)
