"""Tests for the restricted expression evaluator."""

import math

import pytest

from dryrun.errors import ErrorKind, EvaluationError
from dryrun.expression import ExpressionEvaluator, Operators
from dryrun.values import Value, ValueKind


def _make_evaluator(**variables) -> ExpressionEvaluator:
    return ExpressionEvaluator({name: value for name, value in variables.items()})


class TestLiterals:
    def test_integer_literal(self):
        assert _make_evaluator().evaluate("10") == Value.number(10)

    def test_decimal_literal(self):
        assert _make_evaluator().evaluate(" 2.5 ") == Value.number(2.5)

    def test_double_and_single_quoted_strings(self):
        evaluator = _make_evaluator()
        assert evaluator.evaluate('"hello"') == Value.string("hello")
        assert evaluator.evaluate("'world'") == Value.string("world")

    def test_quoted_string_with_operator_inside(self):
        assert _make_evaluator().evaluate('"a - b"') == Value.string("a - b")

    def test_boolean_literals(self):
        evaluator = _make_evaluator()
        assert evaluator.evaluate("true") == Value.boolean(True)
        assert evaluator.evaluate("false") == Value.boolean(False)

    def test_null_and_undefined_literals(self):
        evaluator = _make_evaluator()
        assert evaluator.evaluate("null").kind == ValueKind.NULL
        assert evaluator.evaluate("undefined").kind == ValueKind.UNDEFINED


class TestVariables:
    def test_known_variable(self):
        assert _make_evaluator(x=Value.number(3)).evaluate("x") == Value.number(3)

    def test_unknown_variable_raises(self):
        with pytest.raises(EvaluationError) as exc_info:
            _make_evaluator().evaluate("z")

        assert exc_info.value.name == "z"
        assert exc_info.value.kind == ErrorKind.EVALUATION
        assert "z" in exc_info.value.message

    def test_evaluator_sees_live_table(self):
        table = {}
        evaluator = ExpressionEvaluator(table)
        table["late"] = Value.number(1)
        assert evaluator.evaluate("late") == Value.number(1)


class TestArithmetic:
    def test_variable_addition(self):
        evaluator = _make_evaluator(x=Value.number(10), y=Value.number(20))
        assert evaluator.evaluate("x + y") == Value.number(30)

    @pytest.mark.parametrize(
        "expression, expected",
        [("7 - 2", 5.0), ("3 * 4", 12.0), ("10 / 4", 2.5), ("9/3", 3.0)],
    )
    def test_numeric_operators(self, expression, expected):
        assert _make_evaluator().evaluate(expression) == Value.number(expected)

    def test_string_concatenation(self):
        evaluator = _make_evaluator(name=Value.string("Ada"))
        assert evaluator.evaluate('"Hi " + name') == Value.string("Hi Ada")

    def test_number_plus_string_concatenates(self):
        evaluator = _make_evaluator(n=Value.number(5))
        assert evaluator.evaluate("n + 'px'") == Value.string("5px")

    def test_unknown_operand_is_raw_text(self):
        evaluator = _make_evaluator(x=Value.number(1))
        assert evaluator.evaluate("x + y") == Value.string("1y")

    def test_non_numeric_operand_gives_nan(self):
        result = _make_evaluator().evaluate("a * 2")
        assert result.kind == ValueKind.NUMBER
        assert math.isnan(result.data)

    def test_division_by_zero(self):
        evaluator = _make_evaluator()
        assert evaluator.evaluate("1 / 0") == Value.number(math.inf)
        assert math.isnan(evaluator.evaluate("0 / 0").data)

    def test_only_first_operator_splits(self):
        # The remainder "2 + 3" is one raw-text operand, so '+' concatenates.
        assert _make_evaluator().evaluate("1 + 2 + 3") == Value.string("12 + 3")


class TestComparison:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("sum > 25", True),
            ("sum < 25", False),
            ("sum >= 30", True),
            ("sum <= 29", False),
            ("sum == 30", True),
            ("sum != 30", False),
        ],
    )
    def test_numeric_comparisons(self, expression, expected):
        evaluator = _make_evaluator(sum=Value.number(30))
        assert evaluator.evaluate(expression) == Value.boolean(expected)

    def test_string_comparison(self):
        evaluator = _make_evaluator(a=Value.string("apple"))
        assert evaluator.evaluate("a < 'banana'") == Value.boolean(True)
        assert evaluator.evaluate("a == 'apple'") == Value.boolean(True)

    def test_number_equals_numeric_string(self):
        evaluator = _make_evaluator(n=Value.number(5), s=Value.string("5"))
        assert evaluator.evaluate("n == s") == Value.boolean(True)

    def test_null_equals_undefined(self):
        evaluator = _make_evaluator(a=Value.null(), b=Value.undefined(), c=Value.number(0))
        assert evaluator.evaluate("a == b") == Value.boolean(True)
        assert evaluator.evaluate("a == c") == Value.boolean(False)

    def test_nan_comparisons_are_false(self):
        evaluator = _make_evaluator(n=Value.number(math.nan))
        assert evaluator.evaluate("n < 1") == Value.boolean(False)
        assert evaluator.evaluate("n == n") == Value.boolean(False)
        assert evaluator.evaluate("n != n") == Value.boolean(True)


class TestOpaqueFallback:
    @pytest.mark.parametrize("expression", ["[1, 2, 3]", "foo(1)", "-5", "!done"])
    def test_unclassified_text_is_opaque(self, expression):
        result = _make_evaluator().evaluate(expression)
        assert result == Value.opaque(expression)


class TestResolveOperand:
    def test_never_raises(self):
        evaluator = _make_evaluator()
        assert evaluator.resolve_operand("missing") == Value.opaque("missing")

    def test_literals_and_variables(self):
        evaluator = _make_evaluator(x=Value.boolean(True))
        assert evaluator.resolve_operand("4") == Value.number(4)
        assert evaluator.resolve_operand("'q'") == Value.string("q")
        assert evaluator.resolve_operand("x") == Value.boolean(True)


class TestOperators:
    def test_eval_arithmetic_boolean_operands_are_numeric(self):
        assert Operators.eval_arithmetic("+", Value.boolean(True), Value.number(1)) == Value.number(2)

    def test_eval_comparison_returns_boolean_value(self):
        result = Operators.eval_comparison("<", Value.number(1), Value.number(2))
        assert result == Value.boolean(True)


class TestCondition:
    def test_truthiness_of_value(self):
        evaluator = _make_evaluator(x=Value.number(0), s=Value.string("a"))
        assert evaluator.condition("x") is False
        assert evaluator.condition("s") is True
        assert evaluator.condition("x < 1") is True
