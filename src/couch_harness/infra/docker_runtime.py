"""Docker-CLI backed implementation of :class:`~couch_harness.core.protocols.ContainerRuntime`.

This module is the **only** place in the codebase that invokes the
``docker`` executable.  Commands run synchronously with no timeout;
failures (including a missing ``docker`` binary) are logged and
reported as ``False``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess

from couch_harness.core.models import PortMapping

logger = logging.getLogger(__name__)


class DockerRuntime:
    """Concrete :class:`ContainerRuntime` driving the ``docker`` CLI.

    This class satisfies the protocol structurally, no explicit
    inheritance required.
    """

    def __init__(self, executable: str = "docker") -> None:
        self._executable: str = executable

    # ------------------------------------------------------------------
    # Command construction (pure)
    # ------------------------------------------------------------------

    def run_command(self, name: str, image: str, ports: PortMapping) -> list[str]:
        return [self._executable, "run", "-p", str(ports), "-d", "--name", name, image]

    def stop_command(self, name: str) -> list[str]:
        return [self._executable, "stop", name]

    def remove_command(self, name: str) -> list[str]:
        return [self._executable, "rm", name]

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def start(self, name: str, image: str, ports: PortMapping) -> bool:
        return self._invoke(self.run_command(name, image, ports))

    def stop(self, name: str) -> bool:
        return self._invoke(self.stop_command(name))

    def remove(self, name: str) -> bool:
        return self._invoke(self.remove_command(name))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _invoke(self, command: list[str]) -> bool:
        logger.debug("Commandline: %s", shlex.join(command))
        try:
            result = subprocess.run(command, check=False)
        except OSError as exc:
            logger.error("Could not execute %s: %s", command[0], exc)
            return False
        if result.returncode != 0:
            logger.debug("%s exited with %d", shlex.join(command[:2]), result.returncode)
            return False
        return True
