"""Runtime value variant and the coercions the evaluator needs."""

from __future__ import annotations

import math
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ValueKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    UNDEFINED = "undefined"
    NULL = "null"
    OPAQUE = "opaque"


_NUMERIC_TEXT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Largest magnitude printed in plain integer form before switching to exponent form.
_PLAIN_INTEGER_LIMIT = 1e21


def format_number(x: float) -> str:
    """Render a number the way a browser console prints it."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x.is_integer() and abs(x) < _PLAIN_INTEGER_LIMIT:
        return str(int(x))
    return repr(x)


class Value(BaseModel):
    """Tagged value: NUMBER, STRING, BOOLEAN, UNDEFINED, NULL or OPAQUE.

    OPAQUE carries expression text the evaluator could not classify, kept
    verbatim instead of failing.
    """

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    kind: ValueKind
    data: bool | float | str | None = None

    @classmethod
    def number(cls, x: float) -> Value:
        return cls(kind=ValueKind.NUMBER, data=float(x))

    @classmethod
    def string(cls, s: str) -> Value:
        return cls(kind=ValueKind.STRING, data=s)

    @classmethod
    def boolean(cls, b: bool) -> Value:
        return cls(kind=ValueKind.BOOLEAN, data=bool(b))

    @classmethod
    def undefined(cls) -> Value:
        return cls(kind=ValueKind.UNDEFINED)

    @classmethod
    def null(cls) -> Value:
        return cls(kind=ValueKind.NULL)

    @classmethod
    def opaque(cls, text: str) -> Value:
        return cls(kind=ValueKind.OPAQUE, data=text)

    @property
    def is_string_like(self) -> bool:
        return self.kind in (ValueKind.STRING, ValueKind.OPAQUE)

    @property
    def is_nullish(self) -> bool:
        return self.kind in (ValueKind.UNDEFINED, ValueKind.NULL)

    def stringify(self) -> str:
        """Print form, as written to the output buffer."""
        if self.kind == ValueKind.NUMBER:
            return format_number(self.data)
        if self.kind == ValueKind.BOOLEAN:
            return "true" if self.data else "false"
        if self.kind == ValueKind.UNDEFINED:
            return "undefined"
        if self.kind == ValueKind.NULL:
            return "null"
        return str(self.data)

    def display(self) -> str:
        """Trace form: like stringify() but strings are double-quoted."""
        if self.kind == ValueKind.STRING:
            return f'"{self.data}"'
        return self.stringify()

    def truthy(self) -> bool:
        if self.kind == ValueKind.NUMBER:
            return not (self.data == 0 or math.isnan(self.data))
        if self.kind == ValueKind.BOOLEAN:
            return bool(self.data)
        if self.is_nullish:
            return False
        return self.data != ""

    def to_number(self) -> float:
        if self.kind == ValueKind.NUMBER:
            return self.data
        if self.kind == ValueKind.BOOLEAN:
            return 1.0 if self.data else 0.0
        if self.kind == ValueKind.NULL:
            return 0.0
        if self.kind == ValueKind.UNDEFINED:
            return math.nan
        text = str(self.data).strip()
        if not text:
            return 0.0
        if _NUMERIC_TEXT_RE.match(text):
            return float(text)
        return math.nan
