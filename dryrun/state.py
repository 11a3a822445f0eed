"""Per-run mutable interpreter state (owned by exactly one engine)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .errors import OutputSinkError
from .trace_types import CallFrame, TraceEntry
from .values import Value
from . import constants

OutputSink = Callable[[str], None]


@dataclass
class WriteSet:
    """Names created or changed by the statement currently executing."""

    new: set[str] = field(default_factory=set)
    modified: set[str] = field(default_factory=set)


@dataclass
class InterpreterState:
    # One flat namespace for the whole run; parameter binding writes here too.
    variables: dict[str, Value] = field(default_factory=dict)
    call_stack: list[CallFrame] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    trace: list[TraceEntry] = field(default_factory=list)
    output_sink: Optional[OutputSink] = None

    @property
    def scope(self) -> str:
        if self.call_stack:
            return self.call_stack[-1].function_name
        return constants.GLOBAL_SCOPE

    def write_variable(self, name: str, value: Value, writes: WriteSet):
        """Store *value* and record whether *name* is new or changed."""
        if name not in self.variables:
            writes.new.add(name)
        elif self.variables[name] != value:
            writes.modified.add(name)
        self.variables[name] = value

    def emit(self, text: str):
        """Buffer *text*, then hand it to the sink.

        The text stays buffered even when the sink fails; the failure is
        re-raised as OutputSinkError so the run ends with a terminal snapshot.
        """
        self.output.append(text)
        if self.output_sink is None:
            return
        try:
            self.output_sink(text)
        except Exception as e:
            raise OutputSinkError(constants.OUTPUT_SINK_MESSAGE.format(error=e)) from e
