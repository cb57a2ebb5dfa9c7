"""Gradle-wrapper backed implementation of :class:`~couch_harness.core.protocols.BuildDriver`."""

from __future__ import annotations

import logging
import shlex
import stat
import subprocess
from pathlib import Path

from couch_harness.core.models import BuildInvocation
from couch_harness.exceptions import BuildDriverError

logger = logging.getLogger(__name__)

_EXECUTE_ALL: int = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class GradleDriver:
    """Runs ``gradlew`` from the project directory.

    Parameters
    ----------
    wrapper:
        Path to the ``gradlew`` script.  Its parent directory is used as
        the working directory of the build.
    """

    def __init__(self, wrapper: Path) -> None:
        self._wrapper: Path = wrapper

    def command(self, invocation: BuildInvocation) -> list[str]:
        return [str(self._wrapper), *invocation.arguments]

    def ensure_executable(self) -> None:
        """Equivalent of ``chmod a+x gradlew``; a no-op when already set."""
        try:
            mode = self._wrapper.stat().st_mode
        except FileNotFoundError as exc:
            raise BuildDriverError(
                f"Gradle wrapper not found at {self._wrapper}.",
                hint="Run couch-harness from the project root.",
            ) from exc

        if mode & _EXECUTE_ALL == _EXECUTE_ALL:
            return
        try:
            self._wrapper.chmod(mode | _EXECUTE_ALL)
        except OSError as exc:
            raise BuildDriverError(
                f"Cannot make {self._wrapper} executable: {exc}",
            ) from exc

    def run(self, invocation: BuildInvocation) -> int:
        command = self.command(invocation)
        logger.debug("Commandline: %s", shlex.join(command))
        try:
            result = subprocess.run(command, cwd=self._wrapper.parent, check=False)
        except OSError as exc:
            raise BuildDriverError(
                f"Could not launch {self._wrapper}: {exc}",
            ) from exc
        return result.returncode
