"""Tests for the snapshot recorder."""

import pytest

from dryrun.errors import ErrorKind, EvaluationError, ResourceExceeded
from dryrun.recorder import SnapshotRecorder, variables_snapshot
from dryrun.state import InterpreterState, WriteSet
from dryrun.statements import StatementOutcome
from dryrun.trace_types import Action, CallFrame, ExecutionState
from dryrun.values import Value


def _make_state(**variables) -> InterpreterState:
    state = InterpreterState()
    state.variables.update(variables)
    return state


def _assignment(name: str, new: bool = True) -> StatementOutcome:
    writes = WriteSet(new={name}) if new else WriteSet(modified={name})
    return StatementOutcome(action=Action.ASSIGNMENT, details=f"{name} = 1", writes=writes)


class TestVariablesSnapshot:
    def test_flags_come_from_write_set(self):
        state = _make_state(a=Value.number(1), b=Value.number(2), c=Value.number(3))

        variables = variables_snapshot(state, WriteSet(new={"a"}, modified={"b"}))

        flags = {v.name: (v.is_new, v.is_modified) for v in variables}
        assert flags == {"a": (True, False), "b": (False, True), "c": (False, False)}

    def test_scope_is_global_without_frames(self):
        variables = variables_snapshot(_make_state(a=Value.string("x")))
        assert variables[0].scope == "global"

    def test_scope_is_top_frame(self):
        state = _make_state(a=Value.null())
        state.call_stack.append(CallFrame(function_name="outer", line_number=1))
        state.call_stack.append(CallFrame(function_name="inner", line_number=2))
        assert variables_snapshot(state)[0].scope == "inner"

    def test_type_tag_follows_value_kind(self):
        variables = variables_snapshot(_make_state(flag=Value.boolean(True)))
        assert variables[0].type == Value.boolean(True).kind


class TestSnapshotRecorder:
    def test_starts_with_empty_initial_snapshot(self):
        recorder = SnapshotRecorder()
        assert recorder.snapshots == (ExecutionState(),)

    def test_record_step_appends_trace_and_snapshot(self, fixed_clock):
        recorder = SnapshotRecorder(fixed_clock)
        state = _make_state(a=Value.number(1))
        state.output.append("hi")

        snapshot = recorder.record_step(1, 4, _assignment("a"), state, is_complete=False)

        assert recorder.snapshots[-1] is snapshot
        assert snapshot.current_step == 1
        assert snapshot.current_line == 4
        assert snapshot.output == ("hi",)
        assert snapshot.trace[0].timestamp == fixed_clock()
        assert snapshot.variable("a").is_new is True
        assert len(state.trace) == 1

    def test_later_mutation_does_not_change_snapshot(self):
        recorder = SnapshotRecorder()
        state = _make_state(a=Value.number(1))
        snapshot = recorder.record_step(1, 1, _assignment("a"), state, is_complete=False)

        state.output.append("late")
        state.variables["b"] = Value.number(2)

        assert snapshot.output == ()
        assert snapshot.variable("b") is None

    def test_budget_error_marks_snapshot_terminal(self):
        recorder = SnapshotRecorder()
        error = ResourceExceeded("budget", line=1)

        snapshot = recorder.record_step(
            1, 1, _assignment("a"), _make_state(a=Value.number(1)), is_complete=False, error=error
        )

        assert snapshot.is_complete is True
        assert snapshot.error == "budget"
        assert snapshot.error_kind == ErrorKind.RESOURCE_EXCEEDED
        assert len(snapshot.trace) == 1

    def test_record_failure_clears_flags_and_skips_trace(self):
        recorder = SnapshotRecorder()
        state = _make_state(a=Value.number(1))
        recorder.record_step(1, 1, _assignment("a"), state, is_complete=False)

        snapshot = recorder.record_failure(2, 2, EvaluationError("boom", name="z"), state)

        assert snapshot.is_complete is True
        assert snapshot.error == "boom"
        assert snapshot.error_kind == ErrorKind.EVALUATION
        assert len(snapshot.trace) == 1
        assert snapshot.variable("a").is_new is False

    def test_nothing_is_recorded_after_terminal_snapshot(self):
        recorder = SnapshotRecorder()
        state = _make_state()
        recorder.record_failure(1, 1, EvaluationError("boom"), state)

        assert recorder.is_closed
        with pytest.raises(RuntimeError):
            recorder.record_step(2, 2, _assignment("a"), state, is_complete=True)
