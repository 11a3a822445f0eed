"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .errors import ErrorKind
from .values import Value, ValueKind


class Action(str, Enum):
    ASSIGNMENT = "assignment"
    FUNCTION_CALL = "function_call"
    CONDITION = "condition"
    LOOP = "loop"
    CONSOLE_OUTPUT = "console_output"
    EXPRESSION = "expression"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Variable(_Frozen):
    """A tracked variable as seen at one step.

    ``is_new`` / ``is_modified`` describe only the step that produced the
    snapshot; they are recomputed every step.
    """

    name: str
    value: Value
    type: ValueKind
    scope: str
    is_new: bool = False
    is_modified: bool = False


class FunctionDefinition(_Frozen):
    name: str
    params: tuple[str, ...] = ()
    body: tuple[str, ...] = ()  # stored for display, never evaluated
    declaration_line: int


class CallFrame(_Frozen):
    """Display-only stack entry. Frames are never popped."""

    function_name: str
    line_number: int
    parameters: tuple[Variable, ...] = ()
    return_value: Value | None = None


class TraceEntry(_Frozen):
    step: int
    line: int
    action: Action
    details: str
    timestamp: int  # epoch milliseconds
    call_stack: tuple[CallFrame, ...] = ()
    variables: tuple[Variable, ...] = ()
    condition_result: bool | None = None


class ExecutionState(_Frozen):
    """Immutable snapshot of the interpreter after one processed line."""

    variables: tuple[Variable, ...] = ()
    call_stack: tuple[CallFrame, ...] = ()
    trace: tuple[TraceEntry, ...] = ()
    current_line: int = 0
    current_step: int = 0
    is_complete: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None
    output: tuple[str, ...] = ()

    def variable(self, name: str) -> Variable | None:
        return next((v for v in self.variables if v.name == name), None)
