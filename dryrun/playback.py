"""Clamped random access over a precomputed snapshot sequence."""

from __future__ import annotations

from typing import Iterator, Sequence

from .trace_types import ExecutionState


class PlaybackIndex:
    """Read-only timeline for forward/backward/auto-play stepping.

    Lookups never raise: steps below zero give the initial snapshot and steps
    past the end give the last one.
    """

    def __init__(self, snapshots: Sequence[ExecutionState]):
        if not snapshots:
            raise ValueError("A playback index needs at least the initial snapshot")
        self._snapshots = tuple(snapshots)

    @property
    def total_steps(self) -> int:
        return len(self._snapshots) - 1

    @property
    def initial(self) -> ExecutionState:
        return self._snapshots[0]

    @property
    def final(self) -> ExecutionState:
        return self._snapshots[-1]

    def state_at(self, step: int) -> ExecutionState:
        if step < 0:
            return self._snapshots[0]
        if step > self.total_steps:
            return self._snapshots[-1]
        return self._snapshots[step]

    def can_step_forward(self, step: int) -> bool:
        return step < self.total_steps

    def can_step_backward(self, step: int) -> bool:
        return step > 0

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[ExecutionState]:
        return iter(self._snapshots)
