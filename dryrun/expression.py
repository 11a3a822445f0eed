"""Restricted expression evaluator: literals, variables, one binary operator."""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Mapping

from .errors import EvaluationError
from .values import Value
from . import constants

logger = logging.getLogger(__name__)


class ExpressionPatterns:
    """Compiled regex patterns for the expression shapes the evaluator knows."""

    NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")
    QUOTED_RE = re.compile(r"""^("[^"]*"|'[^']*')$""")
    IDENTIFIER_RE = re.compile(r"^\w+$")
    ARITHMETIC_RE = re.compile(
        r"^(.+?)\s*(" + "|".join(re.escape(op) for op in constants.ARITHMETIC_OPERATORS) + r")\s*(.+)$"
    )
    COMPARISON_RE = re.compile(
        r"^(.+?)\s*(" + "|".join(re.escape(op) for op in constants.COMPARISON_OPERATORS) + r")\s*(.+)$"
    )


_KEYWORD_LITERALS: dict[str, Value] = {
    "true": Value.boolean(True),
    "false": Value.boolean(False),
    "null": Value.null(),
    "undefined": Value.undefined(),
}


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.inf if (a > 0) == (math.copysign(1.0, b) > 0) else -math.inf
    return a / b


def _loose_equals(lhs: Value, rhs: Value) -> bool:
    if lhs.is_nullish or rhs.is_nullish:
        return lhs.is_nullish and rhs.is_nullish
    if lhs.is_string_like and rhs.is_string_like:
        return lhs.data == rhs.data
    return lhs.to_number() == rhs.to_number()


def _relational(compare: Callable[[object, object], bool]) -> Callable[[Value, Value], bool]:
    def evaluate(lhs: Value, rhs: Value) -> bool:
        if lhs.is_string_like and rhs.is_string_like:
            return compare(lhs.data, rhs.data)
        a, b = lhs.to_number(), rhs.to_number()
        if math.isnan(a) or math.isnan(b):
            return False
        return compare(a, b)

    return evaluate


class Operators:
    """Binary operator evaluation over Value operands."""

    NUMERIC_TABLE: dict[str, Callable[[float, float], float]] = {
        "-": lambda a, b: a - b,
        "*": lambda a, b: a * b,
        "/": _divide,
    }

    COMPARISON_TABLE: dict[str, Callable[[Value, Value], bool]] = {
        "==": _loose_equals,
        "!=": lambda a, b: not _loose_equals(a, b),
        "<": _relational(lambda a, b: a < b),
        ">": _relational(lambda a, b: a > b),
        "<=": _relational(lambda a, b: a <= b),
        ">=": _relational(lambda a, b: a >= b),
    }

    @classmethod
    def eval_arithmetic(cls, op: str, lhs: Value, rhs: Value) -> Value:
        if op == "+":
            if lhs.is_string_like or rhs.is_string_like:
                return Value.string(lhs.stringify() + rhs.stringify())
            return Value.number(lhs.to_number() + rhs.to_number())
        return Value.number(cls.NUMERIC_TABLE[op](lhs.to_number(), rhs.to_number()))

    @classmethod
    def eval_comparison(cls, op: str, lhs: Value, rhs: Value) -> Value:
        return Value.boolean(cls.COMPARISON_TABLE[op](lhs, rhs))


class ExpressionEvaluator:
    """Evaluates one expression against a variable table.

    Handles, in order: number literals, quoted strings, keyword literals,
    bare identifiers, one arithmetic operator, one comparison operator.
    Anything else comes back as an OPAQUE value holding the text. Nested or
    multi-operator expressions are not supported; the text after the first
    operator is treated as a single operand.
    """

    def __init__(self, variables: Mapping[str, Value]):
        self._variables = variables

    def evaluate(self, expression: str) -> Value:
        text = expression.strip()

        if ExpressionPatterns.NUMBER_RE.match(text):
            return Value.number(float(text))

        if ExpressionPatterns.QUOTED_RE.match(text):
            return Value.string(text[1:-1])

        if text in _KEYWORD_LITERALS:
            return _KEYWORD_LITERALS[text]

        if ExpressionPatterns.IDENTIFIER_RE.match(text):
            if text in self._variables:
                return self._variables[text]
            raise EvaluationError(
                constants.UNDEFINED_VARIABLE_MESSAGE.format(name=text), name=text
            )

        m = ExpressionPatterns.ARITHMETIC_RE.match(text)
        if m:
            left, op, right = m.groups()
            return Operators.eval_arithmetic(op, self.resolve_operand(left), self.resolve_operand(right))

        m = ExpressionPatterns.COMPARISON_RE.match(text)
        if m:
            left, op, right = m.groups()
            return Operators.eval_comparison(op, self.resolve_operand(left), self.resolve_operand(right))

        logger.debug("Unclassified expression kept as opaque text: %r", text)
        return Value.opaque(text)

    def resolve_operand(self, token: str) -> Value:
        """Restricted resolver for operator operands; never raises."""
        token = token.strip()
        if ExpressionPatterns.NUMBER_RE.match(token):
            return Value.number(float(token))
        if ExpressionPatterns.QUOTED_RE.match(token):
            return Value.string(token[1:-1])
        if token in self._variables:
            return self._variables[token]
        return Value.opaque(token)

    def condition(self, expression: str) -> bool:
        return self.evaluate(expression).truthy()
