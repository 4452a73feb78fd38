from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from autopush.core.result import Err, Ok, Result
from autopush.publish.errors import PublishError, PublishFailure

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish:
    pass


StepOutcome = StepAdvance[S] | StepFinish
StepHandler = Callable[[S], Result[StepOutcome[S], PublishError]]
GetStep = Callable[[S], str]
OnAdvance = Callable[[S], None]


FINISH = StepFinish()


def advance[S](session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def run_state_machine(
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S]],
    on_advance: OnAdvance[S] | None = None,
) -> Result[S, PublishFailure]:
    """Dispatch ``handlers`` by step until one finishes or fails.

    Returns the last session on finish. The first handler error stops the
    machine and is reported together with the step that produced it.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            error = PublishError(kind="invalid_step", message=f"unknown publish step: {step}")
            return Err(PublishFailure(step=step, error=error))

        outcome = handler(current)
        if isinstance(outcome, Err):
            return Err(PublishFailure(step=step, error=outcome.error))

        if isinstance(outcome.value, StepFinish):
            return Ok(current)

        current = outcome.value.session
        if on_advance is not None:
            on_advance(current)
