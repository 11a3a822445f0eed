"""Command-line entry point: trace a demo program and print one snapshot."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import dump_bundle, trace_source
from .run_types import EngineConfig, Language
from .trace_types import ExecutionState
from . import constants


def _format_state(state: ExecutionState, total_steps: int) -> str:
    lines = [f"═══ Step {state.current_step}/{total_steps} (line {state.current_line}) ═══"]

    lines.append("Trace:")
    for entry in state.trace:
        lines.append(f"  [{entry.step}] line {entry.line:<3} {entry.action.value:<15} {entry.details}")

    lines.append("Variables:")
    for var in state.variables:
        flag = " (new)" if var.is_new else " (modified)" if var.is_modified else ""
        lines.append(f"  {var.name} = {var.value.display()}  [{var.type.value}, {var.scope}]{flag}")

    if state.call_stack:
        lines.append("Call stack:")
        for frame in reversed(state.call_stack):
            params = ", ".join(f"{p.name}={p.value.display()}" for p in frame.parameters)
            lines.append(f"  {frame.function_name}({params})  @ line {frame.line_number}")

    lines.append("Output:")
    lines.extend(f"  {text}" for text in state.output)

    if state.error:
        lines.append(f"Error ({state.error_kind.value}): {state.error}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Step-by-step execution tracer")
    parser.add_argument("file", nargs="?", help="Source file to trace")
    parser.add_argument(
        "--language",
        "-l",
        default=Language.JAVASCRIPT.value,
        choices=[lang.value for lang in Language],
        help="Source language tag (default: javascript)",
    )
    parser.add_argument(
        "--max-steps",
        "-n",
        type=int,
        default=constants.DEFAULT_MAX_STEPS,
        help=f"Maximum lines executed (default: {constants.DEFAULT_MAX_STEPS})",
    )
    parser.add_argument(
        "--step", "-s", type=int, default=None, help="Snapshot to show (default: last)"
    )
    parser.add_argument("--export", "-o", default=None, help="Write the JSON bundle to this path")
    parser.add_argument(
        "--legacy-braces",
        action="store_true",
        help="Let an unclosed function body swallow the rest of the source",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log each pipeline stage")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.file:
        source = constants.DEMO_SOURCE
        print("No file provided. Using built-in demo:\n")
        print(source)
    else:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()

    try:
        config = EngineConfig(
            language=args.language,
            max_steps=args.max_steps,
            strict_braces=not args.legacy_braces,
        )
    except ValueError as e:
        parser.error(str(e))

    engine = trace_source(source, config)
    total = engine.get_total_steps()
    step = total if args.step is None else args.step
    state = engine.get_state(step)
    print(_format_state(state, total))

    if args.export:
        path = dump_bundle(engine, args.export)
        print(f"\nExported {total + 1} snapshots to {path}")

    return 1 if state.error else 0


if __name__ == "__main__":
    sys.exit(main())
