"""Infrastructure layer — external system integration.

This layer wraps all interaction with docker, the Gradle wrapper and
the operating system.  Every raw ``OSError`` must be caught here and
either reported as a failed result or re-raised as a
:class:`~couch_harness.exceptions.HarnessError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering); logging only.
* Must expose clean, typed interfaces consumed by the core layer.
"""

from couch_harness.infra.docker_runtime import DockerRuntime
from couch_harness.infra.gradle_driver import GradleDriver
from couch_harness.infra.tool_detector import ToolStatus, detect_docker, detect_gradle_wrapper

__all__: list[str] = [
    "DockerRuntime",
    "GradleDriver",
    "ToolStatus",
    "detect_docker",
    "detect_gradle_wrapper",
]
