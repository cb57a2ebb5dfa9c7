"""Fixed runtime settings for an orchestrator run.

There is no configuration file: the container name, port mapping and
wrapper location are constants of the test harness.  Only the project
directory varies, and defaults to the current working directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from couch_harness.core.models import PortMapping

CONTAINER_NAME: str = "couchdb"
"""Logical name of the database container; owned by one run at a time."""

HOST_PORT: int = 5984
CONTAINER_PORT: int = 15984

GRADLE_WRAPPER: str = "gradlew"


@dataclass(frozen=True, slots=True)
class HarnessSettings:
    """Settings shared by the orchestrator and its infra adapters."""

    project_dir: Path = field(default_factory=Path.cwd)
    container_name: str = CONTAINER_NAME
    ports: PortMapping = PortMapping(host=HOST_PORT, container=CONTAINER_PORT)
    wrapper_name: str = GRADLE_WRAPPER

    @property
    def wrapper_path(self) -> Path:
        return self.project_dir / self.wrapper_name
