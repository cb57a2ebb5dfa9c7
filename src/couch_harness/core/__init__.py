"""Core / service layer — pure orchestration logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No subprocess or filesystem I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from couch_harness.core.models import (
    Backend,
    BuildInvocation,
    HarnessOptions,
    ParsedOptions,
    Platform,
    PortMapping,
)
from couch_harness.core.orchestrator import Orchestrator
from couch_harness.core.protocols import BuildDriver, ContainerRuntime
from couch_harness.core.settings import HarnessSettings

__all__: list[str] = [
    "Backend",
    "BuildDriver",
    "BuildInvocation",
    "ContainerRuntime",
    "HarnessOptions",
    "HarnessSettings",
    "Orchestrator",
    "ParsedOptions",
    "Platform",
    "PortMapping",
]
