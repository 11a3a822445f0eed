"""Engine configuration types (pure data, no business logic)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from . import constants

logger = logging.getLogger(__name__)


class Language(str, Enum):
    """Source language tag. Only JAVASCRIPT is executable."""

    PYTHON = "python"
    JAVASCRIPT = "javascript"
    JAVA = "java"
    CPP = "cpp"


EXECUTABLE_LANGUAGE = Language.JAVASCRIPT

_CAMEL_CASE_KEYS: dict[str, str] = {
    "maxSteps": "max_steps",
    "timeoutMs": "timeout_ms",
    "memoryLimitMB": "memory_limit_mb",
    "strictBraces": "strict_braces",
}

_INT_FIELDS = ("max_steps", "timeout_ms", "memory_limit_mb")


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


@dataclass(frozen=True)
class EngineConfig:
    """Groups trace engine configuration.

    ``timeout_ms`` and ``memory_limit_mb`` are accepted for compatibility with
    callers that send them but are not enforced; ``max_steps`` is the only
    hard limit.
    """

    language: Language = EXECUTABLE_LANGUAGE
    max_steps: int = constants.DEFAULT_MAX_STEPS
    timeout_ms: int = constants.DEFAULT_TIMEOUT_MS
    memory_limit_mb: int = constants.DEFAULT_MEMORY_LIMIT_MB
    strict_braces: bool = True

    def __post_init__(self):
        # Accept plain strings for the language tag; unknown tags raise ValueError.
        object.__setattr__(self, "language", Language(self.language))
        for name in _INT_FIELDS:
            object.__setattr__(self, name, _as_int(name, getattr(self, name)))
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be a positive integer, got {self.max_steps}")

    @property
    def is_executable_language(self) -> bool:
        return self.language == EXECUTABLE_LANGUAGE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Build a config from snake_case or camelCase keys; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                logger.debug("Ignoring unknown config key %r", key)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language.value,
            "max_steps": self.max_steps,
            "timeout_ms": self.timeout_ms,
            "memory_limit_mb": self.memory_limit_mb,
            "strict_braces": self.strict_braces,
        }
