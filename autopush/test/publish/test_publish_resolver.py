from __future__ import annotations

from typing import Any

from autopush.core.result import Err, Ok
from autopush.publish.resolver import resolve, resolve_against_remote
from autopush.publish.semver import SemVer


class TestResolve:
    def test_free_candidate_returned_unchanged(self) -> None:
        assert resolve(SemVer(1, 2, 0), lambda v: False) == SemVer(1, 2, 0)

    def test_skips_existing_versions(self) -> None:
        taken = {SemVer(1, 2, 0), SemVer(1, 2, 1)}
        assert resolve(SemVer(1, 2, 0), taken.__contains__) == SemVer(1, 2, 2)

    def test_collision_after_major_bump_moves_patch(self) -> None:
        taken = {SemVer(3, 0, 0)}
        assert resolve(SemVer(3, 0, 0), taken.__contains__) == SemVer(3, 0, 1)

    def test_never_returns_existing(self) -> None:
        taken = {SemVer(0, 1, p) for p in range(25)}
        result = resolve(SemVer(0, 1, 0), taken.__contains__)
        assert result not in taken
        assert result == SemVer(0, 1, 25)

    def test_probes_in_order(self) -> None:
        probed: list[SemVer] = []

        def exists(v: SemVer) -> bool:
            probed.append(v)
            return v.patch < 2

        resolve(SemVer(1, 0, 0), exists)
        assert probed == [SemVer(1, 0, 0), SemVer(1, 0, 1), SemVer(1, 0, 2)]


class TestResolveAgainstRemote:
    def test_fetches_before_first_probe(self, make_git: Any) -> None:
        git = make_git(remote_tags={"v1.3.3"})

        result = resolve_against_remote(SemVer(1, 3, 3), git=git, remote="origin")

        assert result == Ok(SemVer(1, 3, 4))
        assert git.calls[0] == "fetch_tags"
        assert git.calls[1:] == ["tag_exists v1.3.3", "tag_exists v1.3.4"]

    def test_fetch_failure(self, make_git: Any) -> None:
        git = make_git(fail={"fetch_tags": 1})

        result = resolve_against_remote(SemVer(1, 0, 0), git=git, remote="origin")

        assert isinstance(result, Err)
        assert result.error.kind == "remote_configuration"
        assert not any(c.startswith("tag_exists") for c in git.calls)

    def test_custom_prefix(self, make_git: Any) -> None:
        git = make_git(remote_tags={"release-0.1.0"})

        result = resolve_against_remote(
            SemVer(0, 1, 0), git=git, remote="origin", tag_prefix="release-"
        )

        assert result == Ok(SemVer(0, 1, 1))
