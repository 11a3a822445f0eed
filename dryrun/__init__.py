"""Step-by-step execution trace engine for teaching demos."""

from .engine import TraceEngine  # noqa: F401
from .run_types import EngineConfig, Language  # noqa: F401
from .errors import ErrorKind  # noqa: F401
from .trace_types import Action, ExecutionState  # noqa: F401
from .api import (  # noqa: F401
    trace_source,
    export_bundle,
    dump_bundle,
    load_bundle,
    export_output,
)
