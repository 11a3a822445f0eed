"""Shared fixtures for the trace engine test suite."""

import pytest

FIXED_TIMESTAMP = 1_700_000_000_000


@pytest.fixture
def fixed_clock():
    """Clock returning a constant epoch-ms value so snapshots compare equal."""
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def captured_output():
    """A list plus a sink appending to it."""
    lines: list[str] = []
    return lines, lines.append
