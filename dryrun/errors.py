"""Error taxonomy for the trace engine.

Every error carries an :class:`ErrorKind` so callers can branch on the kind
of failure recorded in a terminal snapshot instead of parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    PARSE = "parse"
    EVALUATION = "evaluation"
    RESOURCE_EXCEEDED = "resource_exceeded"
    OUTPUT = "output"


class ParseErrorReason(str, Enum):
    MALFORMED_DECLARATION = "malformed_declaration"
    UNBALANCED_FUNCTION_BODY = "unbalanced_function_body"


class TraceEngineError(Exception):
    """Base class for failures that halt a run."""

    kind: ErrorKind

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line


class ParseError(TraceEngineError):
    """Malformed function declaration or unbalanced function body."""

    kind = ErrorKind.PARSE

    def __init__(self, reason: ParseErrorReason, message: str, line: int = 0):
        super().__init__(message, line)
        self.reason = reason


class EvaluationError(TraceEngineError):
    """An expression referenced a variable that was never assigned."""

    kind = ErrorKind.EVALUATION

    def __init__(self, message: str, name: str = "", line: int = 0):
        super().__init__(message, line)
        self.name = name


class ResourceExceeded(TraceEngineError):
    """The configured step budget was reached with lines left to run."""

    kind = ErrorKind.RESOURCE_EXCEEDED


class OutputSinkError(TraceEngineError):
    """The caller's output sink raised while receiving printed text."""

    kind = ErrorKind.OUTPUT
