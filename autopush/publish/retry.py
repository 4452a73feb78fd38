from __future__ import annotations

from collections.abc import Callable
from time import sleep
from typing import TypeVar

from autopush.core.result import Err, Ok, Result

T = TypeVar("T")
E = TypeVar("E")


def retry(
    operation: Callable[[], Result[T, E]],
    *,
    attempts: int,
    delay_seconds: float,
    on_failure: Callable[[int, E], None] | None = None,
) -> Result[T, E]:
    """Run ``operation`` until it succeeds or ``attempts`` runs are used up.

    Sleeps ``delay_seconds`` between attempts (not after the last one).
    ``on_failure`` sees the 1-based attempt number and its error.
    Returns the first Ok, or the last Err.
    """
    attempts = max(1, attempts)
    last: Result[T, E] | None = None
    for attempt in range(1, attempts + 1):
        last = operation()
        if isinstance(last, Ok):
            return last

        if on_failure is not None:
            on_failure(attempt, last.error)
        if attempt < attempts:
            sleep(delay_seconds)

    assert isinstance(last, Err)
    return last
