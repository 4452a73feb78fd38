"""Exit codes for the autopush command.

A publish run either reaches ``done`` or stops in ``failed``; the shell only
ever sees one of these two codes.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are part of the CLI contract."""

    OK = 0
    PUBLISH_FAILED = 1
