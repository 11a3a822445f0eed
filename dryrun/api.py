"""Composable API functions around the trace engine.

Each function corresponds to a CLI workflow (run, --export) but is callable
programmatically without argparse.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .engine import ConfigLike, TraceEngine
from .recorder import Clock
from .state import OutputSink
from .trace_types import ExecutionState

logger = logging.getLogger(__name__)


class ExecutionBundle(BaseModel):
    """Persisted form of a finished run."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    source: str
    lines: tuple[str, ...]
    states: tuple[ExecutionState, ...]
    config: dict[str, Any]
    exported_at: str  # ISO-8601, UTC

    @property
    def total_steps(self) -> int:
        return len(self.states) - 1


def trace_source(
    source: str,
    config: ConfigLike = None,
    output_sink: Optional[OutputSink] = None,
    clock: Optional[Clock] = None,
) -> TraceEngine:
    """Build a TraceEngine for *source*.

    Args:
        source: Program text.
        config: EngineConfig or a mapping of its fields (camelCase accepted).
        output_sink: Receives each printed string as it is produced.
        clock: Epoch-millisecond clock for trace timestamps.

    Returns:
        A fully built TraceEngine.
    """
    return TraceEngine(source, config, output_sink=output_sink, clock=clock)


def export_bundle(engine: TraceEngine, exported_at: Optional[datetime] = None) -> ExecutionBundle:
    """Capture source, every snapshot and the config of *engine*."""
    stamp = exported_at or datetime.now(timezone.utc)
    return ExecutionBundle(
        source=engine.source,
        lines=engine.lines,
        states=engine.snapshots,
        config=engine.config.to_dict(),
        exported_at=stamp.isoformat(),
    )


def dump_bundle(engine: TraceEngine, path: Path | str) -> Path:
    """Write the JSON bundle of *engine* to *path* and return the path."""
    target = Path(path)
    target.write_text(export_bundle(engine).model_dump_json(indent=2), encoding="utf-8")
    logger.info("Wrote %d snapshots to %s", engine.get_total_steps() + 1, target)
    return target


def load_bundle(path: Path | str) -> ExecutionBundle:
    return ExecutionBundle.model_validate_json(Path(path).read_text(encoding="utf-8"))


def export_output(state: ExecutionState) -> str:
    """Program output of *state* as plain text, one printed value per line."""
    return "\n".join(state.output)
