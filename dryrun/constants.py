"""Default limits, message templates and the built-in demo program."""

from __future__ import annotations

GLOBAL_SCOPE = "global"

DEFAULT_MAX_STEPS = 1000
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MEMORY_LIMIT_MB = 100

FUNCTION_KEYWORD = "function"
BLOCK_OPEN = "{"
BLOCK_CLOSE = "}"

CONSOLE_IDENTIFIER = "console"
CONSOLE_LOG_PREFIX = "log("

STEP_BUDGET_MESSAGE = "Maximum execution steps exceeded ({max_steps})"
UNDEFINED_VARIABLE_MESSAGE = "Variable '{name}' is not defined"
MALFORMED_DECLARATION_MESSAGE = "Malformed function declaration: {line}"
UNBALANCED_BODY_MESSAGE = "Unbalanced braces in body of function '{name}'"
OUTPUT_SINK_MESSAGE = "Output sink failed: {error}"

ARITHMETIC_OPERATORS: tuple[str, ...] = ("+", "-", "*", "/")
# Two-character operators first so '<=' is never read as '<' followed by '='.
COMPARISON_OPERATORS: tuple[str, ...] = ("<=", ">=", "==", "!=", "<", ">")

DEMO_SOURCE = """\
x = 10
y = 20
sum = x + y
console.log(sum)
if (sum > 25)
  result = "large"
else
  result = "small"
console.log(result)
"""
