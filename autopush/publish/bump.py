"""Change classification and version bumping.

Conventional-commit type tokens map to a ``ChangeCategory``; only ``feat``
(optionally breaking) moves anything but the patch number.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from autopush.publish.semver import SemVer

BREAKING_MARKERS = ("BREAKING CHANGE", "BREAKING-CHANGE")

# type(scope)!: description
_SUBJECT_RE = re.compile(r"^(?P<type>[A-Za-z]+)(?:\([^)]*\))?(?P<bang>!)?:\s*(?P<description>.*)$")


class ChangeCategory(StrEnum):
    FEATURE = "feat"
    FIX = "fix"
    CHORE = "chore"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    OTHER = "other"

    @classmethod
    def from_token(cls, token: str) -> ChangeCategory:
        """Map ``feat``, ``Fix(api)!`` ... to a category; unknown tokens are OTHER."""
        normalized = token.strip().lower().rstrip("!")
        normalized = normalized.split("(", 1)[0]
        for category in cls:
            if category.value == normalized:
                return category
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class ParsedSubject:
    category: ChangeCategory
    description: str
    breaking: bool


def is_breaking(description: str) -> bool:
    return any(marker in description for marker in BREAKING_MARKERS)


def parse_commit_subject(subject: str) -> ParsedSubject | None:
    """Parse ``type(scope)!: description``; None if the subject is not conventional."""
    m = _SUBJECT_RE.match(subject.strip())
    if m is None:
        return None
    description = m.group("description")
    return ParsedSubject(
        category=ChangeCategory.from_token(m.group("type")),
        description=description,
        breaking=m.group("bang") is not None or is_breaking(description),
    )


def bump(base: SemVer, category: ChangeCategory, breaking: bool) -> SemVer:
    """Next version after a change of ``category``.

    ``breaking`` only matters for features: it resets minor and patch and
    increments major. Every other category increments patch.
    """
    if category is ChangeCategory.FEATURE and breaking:
        return SemVer(base.major + 1, 0, 0)
    if category is ChangeCategory.FEATURE:
        return SemVer(base.major, base.minor + 1, 0)
    return SemVer(base.major, base.minor, base.patch + 1)
