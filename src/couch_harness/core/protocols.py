"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, so the orchestrator can be exercised without docker
or gradle installed.
"""

from __future__ import annotations

from typing import Protocol

from couch_harness.core.models import BuildInvocation, PortMapping


class ContainerRuntime(Protocol):
    """Contract for container runtimes (docker).

    Every method reports success as a boolean and must not raise for an
    unsuccessful command; implementations log the failure instead.
    """

    def start(self, name: str, image: str, ports: PortMapping) -> bool:
        """Start a detached container *name* from *image*."""
        ...  # pragma: no cover

    def stop(self, name: str) -> bool:
        """Stop the container *name*."""
        ...  # pragma: no cover

    def remove(self, name: str) -> bool:
        """Remove the container *name*."""
        ...  # pragma: no cover


class BuildDriver(Protocol):
    """Contract for the build tool wrapper (gradle)."""

    def ensure_executable(self) -> None:
        """Make the wrapper script executable.

        Raises
        ------
        BuildDriverError
            When the wrapper does not exist or cannot be modified.
        """
        ...  # pragma: no cover

    def run(self, invocation: BuildInvocation) -> int:
        """Run the wrapper and return its exit status.

        Raises
        ------
        BuildDriverError
            When the wrapper cannot be launched at all.
        """
        ...  # pragma: no cover
