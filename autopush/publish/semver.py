from __future__ import annotations

import re
from dataclasses import dataclass

from autopush.core.result import Err, Ok, Result
from autopush.publish.errors import PublishError

_PREFIX_RE = re.compile(r"^(?:[^0-9.\-]+-)?[^0-9.\-]*")
_COMPONENT_RE = re.compile(r"^[0-9]+$")
_NEGATIVE_RE = re.compile(r"^-[0-9]+$")

_MAX_COMPONENTS = 3


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError(f"version components must be non-negative: {self!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"

    def next_patch(self) -> SemVer:
        return SemVer(self.major, self.minor, self.patch + 1)


# Used instead of parsing when the repository has no tag yet.
INITIAL_VERSION = SemVer(0, 1, 0)


def parse_tag(text: str) -> Result[SemVer, PublishError]:
    """Parse a tag such as ``v1.2.3``, ``release-2.0`` or ``4``.

    A leading non-numeric prefix is ignored, including one dash right after
    it (``release-``, ``v-``). Up to three dot-separated non-negative
    integers follow; missing ones are zero. A dash with no prefix before it
    is a negative number, so ``-1.2.3`` is rejected.
    """
    tag = text.strip()
    body = _PREFIX_RE.sub("", tag, count=1)
    if not body:
        return Err(_malformed(text, "no version number"))

    parts = body.split(".")
    if len(parts) > _MAX_COMPONENTS:
        return Err(_malformed(text, f"more than {_MAX_COMPONENTS} components"))

    numbers: list[int] = []
    for part in parts:
        if _NEGATIVE_RE.match(part):
            return Err(_malformed(text, f"negative component {part!r}"))
        if not _COMPONENT_RE.match(part):
            return Err(_malformed(text, f"non-numeric component {part!r}"))
        numbers.append(int(part))

    numbers.extend([0] * (_MAX_COMPONENTS - len(numbers)))
    return Ok(SemVer(numbers[0], numbers[1], numbers[2]))


def _malformed(text: str, reason: str) -> PublishError:
    return PublishError(
        kind="malformed_tag",
        message=f"Latest tag is not a semantic version: {text!r}",
        hint=reason,
    )
