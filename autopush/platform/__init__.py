"""Operating-system adapters."""

from autopush.platform.process import ProcessError, run

__all__ = ["ProcessError", "run"]
