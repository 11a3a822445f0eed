"""Snapshot recorder: turns each processed line into an immutable ExecutionState."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .errors import TraceEngineError
from .state import InterpreterState, WriteSet
from .statements import StatementOutcome
from .trace_types import ExecutionState, TraceEntry, Variable

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def variables_snapshot(state: InterpreterState, writes: Optional[WriteSet] = None) -> tuple[Variable, ...]:
    """Every tracked variable, labelled with the current scope.

    Flags come from *writes* only, so they describe just this step.
    """
    writes = writes or WriteSet()
    scope = state.scope
    return tuple(
        Variable(
            name=name,
            value=value,
            type=value.kind,
            scope=scope,
            is_new=name in writes.new,
            is_modified=name in writes.modified,
        )
        for name, value in state.variables.items()
    )


class SnapshotRecorder:
    """Append-only store of snapshots; snapshot[0] is the empty initial state."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or wall_clock_ms
        self._snapshots: list[ExecutionState] = [ExecutionState()]

    @property
    def snapshots(self) -> tuple[ExecutionState, ...]:
        return tuple(self._snapshots)

    @property
    def is_closed(self) -> bool:
        return self._snapshots[-1].is_complete

    def _ensure_open(self):
        if self.is_closed:
            raise RuntimeError("Cannot record past a terminal snapshot")

    def record_step(
        self,
        step: int,
        line_number: int,
        outcome: StatementOutcome,
        state: InterpreterState,
        is_complete: bool,
        error: Optional[TraceEngineError] = None,
    ) -> ExecutionState:
        """Record the effect of one processed line.

        A non-None *error* (the step budget) makes this snapshot terminal
        while still keeping the line's own trace entry.
        """
        self._ensure_open()
        variables = variables_snapshot(state, outcome.writes)
        call_stack = tuple(state.call_stack)
        state.trace.append(
            TraceEntry(
                step=step,
                line=line_number,
                action=outcome.action,
                details=outcome.details,
                timestamp=self._clock(),
                call_stack=call_stack,
                variables=variables,
                condition_result=outcome.condition_result,
            )
        )
        snapshot = ExecutionState(
            variables=variables,
            call_stack=call_stack,
            trace=tuple(state.trace),
            current_line=line_number,
            current_step=step,
            is_complete=is_complete or error is not None,
            error=error.message if error is not None else None,
            error_kind=error.kind if error is not None else None,
            output=tuple(state.output),
        )
        self._snapshots.append(snapshot)
        return snapshot

    def record_failure(
        self,
        step: int,
        line_number: int,
        error: TraceEngineError,
        state: InterpreterState,
    ) -> ExecutionState:
        """Record the terminal snapshot for a line that failed to execute."""
        self._ensure_open()
        logger.info("Run halted at step %d (line %d): %s", step, line_number, error.message)
        snapshot = ExecutionState(
            variables=variables_snapshot(state),
            call_stack=tuple(state.call_stack),
            trace=tuple(state.trace),
            current_line=line_number,
            current_step=step,
            is_complete=True,
            error=error.message,
            error_kind=error.kind,
            output=tuple(state.output),
        )
        self._snapshots.append(snapshot)
        return snapshot
