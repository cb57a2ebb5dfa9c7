"""Core orchestrator — container lifecycle around one Gradle build.

The orchestrator depends on a
:class:`~couch_harness.core.protocols.ContainerRuntime` and a
:class:`~couch_harness.core.protocols.BuildDriver` injected at
construction time, keeping the core free of ``subprocess`` imports.

Sequence
--------
1. Start the database container (skipped for local backends).  If that
   fails, remove any partial container and abort: the build never
   runs without its database.
2. Make the wrapper executable and run the build for the platform.
3. Stop and remove the container (skipped for local backends).
   Teardown failures are logged and never replace the build status.
"""

from __future__ import annotations

import logging

from couch_harness.core.models import BuildInvocation, HarnessOptions
from couch_harness.core.options import build_invocation
from couch_harness.core.protocols import BuildDriver, ContainerRuntime
from couch_harness.core.settings import HarnessSettings
from couch_harness.exceptions import ContainerStartError

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs a single build against a freshly started database container.

    Parameters
    ----------
    runtime:
        Any object satisfying the :class:`ContainerRuntime` protocol.
    driver:
        Any object satisfying the :class:`BuildDriver` protocol.
    settings:
        Container name and port mapping to use.
    """

    def __init__(
        self,
        runtime: ContainerRuntime,
        driver: BuildDriver,
        settings: HarnessSettings,
    ) -> None:
        self._runtime: ContainerRuntime = runtime
        self._driver: BuildDriver = driver
        self._settings: HarnessSettings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, options: HarnessOptions) -> int:
        """Execute the full lifecycle and return the build's exit status.

        Raises
        ------
        ContainerStartError
            When the container cannot be started.  The build is not run.
        BuildDriverError
            When the wrapper is missing or cannot be launched.  Teardown
            has already been attempted when this propagates.
        """
        invocation = build_invocation(options.platform, options.pass_through)
        manage_container = not options.backend.is_local

        if manage_container:
            self._start_container(options.backend.image)
        else:
            logger.info("Using local backend, no container is started")

        try:
            return self._build(invocation)
        finally:
            if manage_container:
                self._teardown()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _start_container(self, image: str) -> None:
        name = self._settings.container_name
        logger.info("Starting docker container %s (image %s)", name, image)
        if self._runtime.start(name, image, self._settings.ports):
            return

        # A failed `run` can still leave a created container behind.
        if not self._runtime.remove(name):
            logger.debug("No partial container %s to remove", name)
        raise ContainerStartError(
            f"Failed to start docker container {name!r} from image {image!r}.",
            hint=(
                f"Check that docker is running, that port "
                f"{self._settings.ports.host} is free, and that no container "
                f"named {name!r} already exists."
            ),
        )

    def _build(self, invocation: BuildInvocation) -> int:
        logger.info("Performing build")
        self._driver.ensure_executable()
        exit_code = self._driver.run(invocation)
        if exit_code != 0:
            logger.warning("Build finished with exit code %d", exit_code)
        return exit_code

    def _teardown(self) -> None:
        name = self._settings.container_name
        logger.info("Tearing down docker container %s", name)
        if not self._runtime.stop(name):
            logger.warning("Could not stop container %s", name)
        if not self._runtime.remove(name):
            logger.warning("Could not remove container %s", name)
