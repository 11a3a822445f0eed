"""Trace engine: builds the full snapshot timeline at construction time."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .errors import ResourceExceeded, TraceEngineError
from .playback import PlaybackIndex
from .recorder import Clock, SnapshotRecorder
from .registry import FunctionRegistry, build_registry
from .run_types import EngineConfig
from .source import normalize_source
from .state import InterpreterState, OutputSink
from .statements import execute_statement
from .trace_types import ExecutionState, FunctionDefinition
from . import constants

logger = logging.getLogger(__name__)

ConfigLike = Union[EngineConfig, Mapping[str, Any], None]


def _coerce_config(config: ConfigLike) -> EngineConfig:
    if config is None:
        return EngineConfig()
    if isinstance(config, EngineConfig):
        return config
    return EngineConfig.from_dict(dict(config))


def _is_block_close(line: str) -> bool:
    return line == constants.BLOCK_CLOSE


class TraceEngine:
    """Runs a demo program once and exposes its snapshots for replay.

    Construction normalizes the source, builds the function table and
    executes every line in a single linear pass. Errors inside the program
    never escape: they end the timeline with a terminal snapshot whose
    ``error`` / ``error_kind`` describe the failure.

    Args:
        source: Program text.
        config: EngineConfig, or a mapping accepted by EngineConfig.from_dict.
        output_sink: Called synchronously with each printed string, in order.
        clock: Returns epoch milliseconds for trace timestamps.
    """

    def __init__(
        self,
        source: str,
        config: ConfigLike = None,
        output_sink: Optional[OutputSink] = None,
        clock: Optional[Clock] = None,
    ):
        self._source = source
        self._config = _coerce_config(config)
        self._lines = normalize_source(source)
        self._registry = FunctionRegistry()

        if not self._config.is_executable_language:
            logger.warning(
                "Language '%s' is not executable yet; running as javascript",
                self._config.language.value,
            )
        logger.debug(
            "timeout_ms=%d and memory_limit_mb=%d are accepted but not enforced",
            self._config.timeout_ms,
            self._config.memory_limit_mb,
        )

        recorder = SnapshotRecorder(clock)
        self._execute(recorder, InterpreterState(output_sink=output_sink))
        self._index = PlaybackIndex(recorder.snapshots)
        logger.info(
            "Trace built: %d lines, %d steps%s",
            len(self._lines),
            self._index.total_steps,
            f", halted: {self._index.final.error}" if self._index.final.error else "",
        )

    def _execute(self, recorder: SnapshotRecorder, state: InterpreterState):
        try:
            self._registry = build_registry(self._lines, self._config.strict_braces)
        except TraceEngineError as e:
            recorder.record_failure(1, e.line, e, state)
            return

        executable = [
            (number, line)
            for number, line in enumerate(self._lines, start=1)
            if number not in self._registry.declaration_lines and not _is_block_close(line)
        ]
        max_steps = self._config.max_steps

        for step, (line_number, line) in enumerate(executable, start=1):
            try:
                outcome = execute_statement(line, line_number, state, self._registry)
            except TraceEngineError as e:
                recorder.record_failure(step, line_number, e, state)
                return

            is_last = step == len(executable)
            budget_error = None
            if step >= max_steps and not is_last:
                budget_error = ResourceExceeded(
                    constants.STEP_BUDGET_MESSAGE.format(max_steps=max_steps),
                    line=line_number,
                )
                logger.warning("Step budget of %d exhausted at line %d", max_steps, line_number)

            recorder.record_step(
                step, line_number, outcome, state, is_complete=is_last, error=budget_error
            )
            if budget_error is not None:
                return

    # ── Read-only accessors ──────────────────────────────────────

    def get_state(self, step: int) -> ExecutionState:
        return self._index.state_at(step)

    def get_total_steps(self) -> int:
        return self._index.total_steps

    @property
    def playback(self) -> PlaybackIndex:
        return self._index

    @property
    def snapshots(self) -> tuple[ExecutionState, ...]:
        return tuple(self._index)

    @property
    def source(self) -> str:
        return self._source

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def functions(self) -> dict[str, FunctionDefinition]:
        return dict(self._registry.functions)

    @property
    def is_complete(self) -> bool:
        """Whether the run reached its end.

        A source with no executable lines finishes without recording a step,
        so snapshot[0] stays the untouched initial state and only this flag
        reports completion.
        """
        return self._index.final.is_complete or self._index.total_steps == 0
