"""Function table: pre-scan of declarations and their (unexecuted) bodies."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .errors import ParseError, ParseErrorReason
from .trace_types import FunctionDefinition
from . import constants

logger = logging.getLogger(__name__)


class DeclarationPatterns:
    """Compiled regex patterns for function declarations."""

    HEADER_RE = re.compile(r"^function\s+(\w+)\s*\(([^)]*)\)\s*(\{.*\}|\{)?$")
    KEYWORD_RE = re.compile(r"^function(\s|\(|$)")


@dataclass
class FunctionRegistry:
    # function name → definition
    functions: dict[str, FunctionDefinition] = field(default_factory=dict)
    # 1-based line numbers of declaration headers and detached '{' openers
    declaration_lines: set[int] = field(default_factory=set)

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def get(self, name: str) -> FunctionDefinition | None:
        return self.functions.get(name)


def _parse_params(params: str) -> tuple[str, ...]:
    return tuple(p.strip() for p in params.split(",") if p.strip())


def _brace_delta(line: str) -> int:
    return line.count(constants.BLOCK_OPEN) - line.count(constants.BLOCK_CLOSE)


def _scan_body(
    lines: tuple[str, ...], header_index: int, name: str, has_opener: bool
) -> tuple[tuple[str, ...], int | None]:
    """Return (body lines, index of a detached '{' opener line or None).

    Raises ParseError when the header has no opening brace anywhere or the
    braces never balance.
    """
    depth = 1 if has_opener else 0
    start = header_index + 1
    opener_index: int | None = None

    if not has_opener:
        if start >= len(lines) or not lines[start].startswith(constants.BLOCK_OPEN):
            raise ParseError(
                ParseErrorReason.MALFORMED_DECLARATION,
                constants.MALFORMED_DECLARATION_MESSAGE.format(line=lines[header_index]),
                line=header_index + 1,
            )
        opener_index = start
        depth = _brace_delta(lines[start])
        start += 1
        if depth <= 0:
            return (), opener_index

    body: list[str] = []
    for line in lines[start:]:
        depth += _brace_delta(line)
        if depth <= 0:
            return tuple(body), opener_index
        body.append(line)

    raise ParseError(
        ParseErrorReason.UNBALANCED_FUNCTION_BODY,
        constants.UNBALANCED_BODY_MESSAGE.format(name=name),
        line=header_index + 1,
    )


def _scan_body_legacy(lines: tuple[str, ...], header_index: int) -> tuple[str, ...]:
    """Line-wise brace counting that silently swallows an unclosed body."""
    body: list[str] = []
    depth = 1
    j = header_index + 1
    while j < len(lines) and depth > 0:
        line = lines[j]
        if constants.BLOCK_OPEN in line:
            depth += 1
        if constants.BLOCK_CLOSE in line:
            depth -= 1
        if depth > 0:
            body.append(line)
        j += 1
    return tuple(body)


def build_registry(
    lines: tuple[str, ...], strict_braces: bool = True
) -> FunctionRegistry:
    """Scan normalized lines once for ``function name(params)`` declarations.

    Args:
        lines: Output of :func:`dryrun.source.normalize_source`.
        strict_braces: Raise ParseError on malformed headers and unbalanced
            bodies, and register one-line ``{ ... }`` bodies. When False, an
            unclosed body silently consumes the rest of the source and
            one-line declarations run as ordinary expressions.

    Returns:
        A FunctionRegistry keyed by function name.
    """
    registry = FunctionRegistry()

    for index, line in enumerate(lines):
        m = DeclarationPatterns.HEADER_RE.match(line)
        if not m:
            if strict_braces and DeclarationPatterns.KEYWORD_RE.match(line):
                raise ParseError(
                    ParseErrorReason.MALFORMED_DECLARATION,
                    constants.MALFORMED_DECLARATION_MESSAGE.format(line=line),
                    line=index + 1,
                )
            continue

        name, params, opener = m.group(1), m.group(2), m.group(3) or ""
        if opener not in ("", constants.BLOCK_OPEN):
            # Body closed on the header line: function f(a) { return a }
            if not strict_braces:
                continue
            if _brace_delta(opener) != 0:
                raise ParseError(
                    ParseErrorReason.UNBALANCED_FUNCTION_BODY,
                    constants.UNBALANCED_BODY_MESSAGE.format(name=name),
                    line=index + 1,
                )
            inline = opener[1:-1].strip()
            body = (inline,) if inline else ()
        elif strict_braces:
            body, opener_index = _scan_body(lines, index, name, has_opener=bool(opener))
            if opener_index is not None:
                registry.declaration_lines.add(opener_index + 1)
        else:
            body = _scan_body_legacy(lines, index)

        if name in registry.functions:
            logger.info("Function '%s' redeclared on line %d", name, index + 1)
        registry.functions[name] = FunctionDefinition(
            name=name,
            params=_parse_params(params),
            body=body,
            declaration_line=index + 1,
        )
        registry.declaration_lines.add(index + 1)

    logger.info("Registered %d function(s)", len(registry.functions))
    return registry
