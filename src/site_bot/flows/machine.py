"""Fixed-order step sequences for multi-step flows."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import Generic, TypeVar

S = TypeVar("S", bound=enum.Enum)


class StepSequence(Generic[S]):
    """An ordered, non-branching list of steps.

    A flow only ever moves from a step to :meth:`next` of it, so valid input
    can never skip a step and invalid input never moves at all.
    """

    def __init__(self, steps: Sequence[S]) -> None:
        if not steps:
            raise ValueError("A step sequence needs at least one step")
        self._steps = tuple(steps)
        self._index = {step: i for i, step in enumerate(self._steps)}

    @property
    def first(self) -> S:
        return self._steps[0]

    def next(self, step: S) -> S | None:
        """The step after *step*, or ``None`` when *step* is the last one."""
        i = self._index[step]
        return self._steps[i + 1] if i + 1 < len(self._steps) else None

    def __contains__(self, step: object) -> bool:
        return step in self._index

    def __iter__(self):
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
