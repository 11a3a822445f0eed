"""Statement classification and execution.

Each logical line is matched against an ordered list of rules; the first rule
that handles the line wins. Order matters because one line can fit several
shapes (``foo(1)`` is both a call and a fallback expression).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from .expression import ExpressionEvaluator
from .registry import FunctionRegistry
from .state import InterpreterState, WriteSet
from .trace_types import Action, CallFrame, Variable
from .values import Value
from . import constants

logger = logging.getLogger(__name__)


class StatementPatterns:
    """Compiled regex patterns for recognized statement shapes."""

    ASSIGNMENT_RE = re.compile(r"^(\w+)\s*=(?!=)\s*(.+)$")
    CALL_RE = re.compile(r"^(\w+)\s*\((.*)\)$")
    CONSOLE_LOG_RE = re.compile(r"^console\.log\((.+)\)$")
    IF_RE = re.compile(r"^if\s*\((.+)\)\s*\{?$")
    FOR_RE = re.compile(r"^for\s*\((.+)\)\s*\{?$")


@dataclass
class StatementOutcome:
    """What one line did: its trace action, details and variable writes."""

    action: Action
    details: str
    writes: WriteSet = field(default_factory=WriteSet)
    condition_result: bool | None = None


@dataclass
class RuleResult:
    """Result of offering a line to one rule."""

    handled: bool
    outcome: StatementOutcome | None = None

    @classmethod
    def not_handled(cls) -> RuleResult:
        return cls(handled=False)

    @classmethod
    def success(cls, outcome: StatementOutcome) -> RuleResult:
        return cls(handled=True, outcome=outcome)


@dataclass
class StatementContext:
    """Everything a rule handler may read or mutate."""

    state: InterpreterState
    registry: FunctionRegistry
    line: str
    line_number: int

    @property
    def evaluator(self) -> ExpressionEvaluator:
        return ExpressionEvaluator(self.state.variables)


# ── Rule handlers ────────────────────────────────────────────────


def _handle_assignment(m: re.Match, ctx: StatementContext) -> RuleResult:
    name, expression = m.group(1), m.group(2)
    value = ctx.evaluator.evaluate(expression)
    writes = WriteSet()
    ctx.state.write_variable(name, value, writes)
    return RuleResult.success(
        StatementOutcome(
            action=Action.ASSIGNMENT,
            details=f"{name} = {value.display()}",
            writes=writes,
        )
    )


def _print(expression: str, ctx: StatementContext) -> RuleResult:
    value = ctx.evaluator.evaluate(expression)
    ctx.state.emit(value.stringify())
    return RuleResult.success(
        StatementOutcome(
            action=Action.CONSOLE_OUTPUT,
            details=f"console.log({value.display()})",
        )
    )


def _handle_console_call(m: re.Match, ctx: StatementContext) -> RuleResult:
    """``console(log(expr))``: the call shape whose callee is ``console``."""
    callee, args = m.group(1), m.group(2)
    prefix = constants.CONSOLE_LOG_PREFIX
    if callee != constants.CONSOLE_IDENTIFIER or not args.startswith(prefix):
        return RuleResult.not_handled()
    if not args.endswith(")") or len(args) <= len(prefix) + 1:
        return RuleResult.not_handled()
    return _print(args[len(prefix) : -1], ctx)


def _handle_console_log(m: re.Match, ctx: StatementContext) -> RuleResult:
    return _print(m.group(1), ctx)


def _split_arguments(args: str) -> list[str]:
    if not args.strip():
        return []
    return [a.strip() for a in args.split(",")]


def _handle_function_call(m: re.Match, ctx: StatementContext) -> RuleResult:
    name, args = m.group(1), m.group(2)
    func = ctx.registry.get(name)
    if func is None:
        return RuleResult.not_handled()

    evaluator = ctx.evaluator
    arg_values = [evaluator.evaluate(a) for a in _split_arguments(args)]
    bound = [
        (param, arg_values[i] if i < len(arg_values) else Value.undefined())
        for i, param in enumerate(func.params)
    ]

    ctx.state.call_stack.append(
        CallFrame(
            function_name=name,
            line_number=ctx.line_number,
            parameters=tuple(
                Variable(name=param, value=value, type=value.kind, scope=name)
                for param, value in bound
            ),
        )
    )

    # Parameters land in the global table and overwrite same-named globals.
    writes = WriteSet()
    for param, value in bound:
        ctx.state.write_variable(param, value, writes)

    rendered = ", ".join(v.display() for v in arg_values)
    return RuleResult.success(
        StatementOutcome(
            action=Action.FUNCTION_CALL,
            details=f"{name}({rendered})",
            writes=writes,
        )
    )


def _handle_conditional(m: re.Match, ctx: StatementContext) -> RuleResult:
    condition = m.group(1)
    result = ctx.evaluator.condition(condition)
    return RuleResult.success(
        StatementOutcome(
            action=Action.CONDITION,
            details=f"if ({condition}) → {'true' if result else 'false'}",
            condition_result=result,
        )
    )


def _handle_loop(m: re.Match, ctx: StatementContext) -> RuleResult:
    return RuleResult.success(
        StatementOutcome(action=Action.LOOP, details=f"for ({m.group(1)})")
    )


@dataclass(frozen=True)
class StatementRule:
    name: str
    pattern: re.Pattern
    handler: Callable[[re.Match, StatementContext], RuleResult]


STATEMENT_RULES: tuple[StatementRule, ...] = (
    StatementRule("assignment", StatementPatterns.ASSIGNMENT_RE, _handle_assignment),
    StatementRule("console_call", StatementPatterns.CALL_RE, _handle_console_call),
    StatementRule("console_log", StatementPatterns.CONSOLE_LOG_RE, _handle_console_log),
    StatementRule("function_call", StatementPatterns.CALL_RE, _handle_function_call),
    StatementRule("conditional", StatementPatterns.IF_RE, _handle_conditional),
    StatementRule("loop", StatementPatterns.FOR_RE, _handle_loop),
)


def execute_statement(
    line: str,
    line_number: int,
    state: InterpreterState,
    registry: FunctionRegistry,
) -> StatementOutcome:
    """Classify *line* and apply its effects to *state*.

    Raises:
        EvaluationError: An expression on the line referenced an unknown
            variable. *state* is left as it was before the failing write.
    """
    ctx = StatementContext(state=state, registry=registry, line=line, line_number=line_number)
    for rule in STATEMENT_RULES:
        m = rule.pattern.match(line)
        if not m:
            continue
        result = rule.handler(m, ctx)
        if result.handled:
            logger.debug("Line %d matched %s: %s", line_number, rule.name, line)
            return result.outcome

    logger.debug("Line %d is a plain expression: %s", line_number, line)
    return StatementOutcome(action=Action.EXPRESSION, details=line)
