"""Source normalization: raw text to logical lines."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def normalize_source(source: str) -> tuple[str, ...]:
    """Split *source* into trimmed, non-blank lines.

    Positions in the returned tuple (1-based) are the line numbers used by
    every later stage. Blank lines are dropped, so these numbers do not match
    the raw text when it contains blank lines; see :func:`source_line_map`.
    """
    lines = tuple(
        stripped for stripped in (line.strip() for line in source.splitlines()) if stripped
    )
    logger.debug("Normalized %d raw lines to %d logical lines", source.count("\n") + 1, len(lines))
    return lines


def source_line_map(source: str) -> dict[int, int]:
    """Map logical line numbers to 1-based raw line numbers in *source*.

    Lets a line-highlighting consumer undo the blank-line filtering.
    """
    mapping: dict[int, int] = {}
    logical = 0
    for raw_number, line in enumerate(source.splitlines(), start=1):
        if line.strip():
            logical += 1
            mapping[logical] = raw_number
    return mapping
