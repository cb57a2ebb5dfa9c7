"""CLI application entry point and command routing for couch-harness.

This module is the **sole error boundary** for the entire application.
It catches :class:`~couch_harness.exceptions.HarnessError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here; parsing is delegated to
  :mod:`couch_harness.core.options` and the run itself to
  :class:`~couch_harness.core.orchestrator.Orchestrator`.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import logging
import shlex
import sys

from rich.markup import escape

from couch_harness.cli import exit_codes
from couch_harness.cli.console import configure_logging, console
from couch_harness.core.models import HarnessOptions
from couch_harness.core.options import (
    apply_defaults,
    build_invocation,
    parse_args,
    resolve_options,
)
from couch_harness.core.settings import HarnessSettings
from couch_harness.exceptions import HarnessError
from couch_harness.version import __version__

logger = logging.getLogger(__name__)

USAGE: str = """\
usage: couch-harness [-couch BACKEND] [-platform PLATFORM] [-D<name>=<value> ...]
                     [--dry-run] [--verbose]
       couch-harness doctor
       couch-harness --help | --version

Start a database container, run the Gradle integration build against it,
then tear the container down.  Exits with the build's exit code.

options:
  -couch BACKEND      couchdb1.6 (default), couchdb2.0, cloudantSAAS, cloudantlocal
  -platform PLATFORM  java (default) or android
  -D<name>=<value>    forwarded verbatim to gradlew
  --dry-run           show the commands without running them
  --verbose           log every external command line
  --version           show the version and exit
  --help              show this message and exit
"""


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_run(options: HarnessOptions, settings: HarnessSettings) -> int:
    """Run the full container + build lifecycle."""
    from couch_harness.core.orchestrator import Orchestrator
    from couch_harness.infra.docker_runtime import DockerRuntime
    from couch_harness.infra.gradle_driver import GradleDriver

    orchestrator = Orchestrator(
        DockerRuntime(),
        GradleDriver(settings.wrapper_path),
        settings,
    )
    return orchestrator.run(options)


def _handle_dry_run(options: HarnessOptions, settings: HarnessSettings) -> int:
    """Log the commands a real run would execute, without executing them."""
    from couch_harness.infra.docker_runtime import DockerRuntime
    from couch_harness.infra.gradle_driver import GradleDriver

    runtime = DockerRuntime()
    driver = GradleDriver(settings.wrapper_path)
    name = settings.container_name
    invocation = build_invocation(options.platform, options.pass_through)

    commands: list[list[str]] = []
    if not options.backend.is_local:
        commands.append(runtime.run_command(name, options.backend.image, settings.ports))
    commands.append(driver.command(invocation))
    if not options.backend.is_local:
        commands.append(runtime.stop_command(name))
        commands.append(runtime.remove_command(name))

    for command in commands:
        logger.info("Would run: %s", shlex.join(command))
    return exit_codes.SUCCESS


def _handle_doctor(settings: HarnessSettings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from couch_harness.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, settings: HarnessSettings | None = None) -> int:
    """Run the couch-harness CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    settings:
        Harness settings; defaults to the current directory as project root.

    Returns
    -------
    int
        OS process exit code, the build's own exit code for a real run.

    Raises
    ------
    HarnessError
        For malformed arguments, a container that fails to start, or a
        missing Gradle wrapper.  :func:`cli` renders these.
    """
    if argv is None:
        argv = sys.argv[1:]
    if settings is None:
        settings = HarnessSettings()

    parsed = parse_args(argv)

    if "help" in parsed.switches:
        console.print(USAGE, markup=False, highlight=False)
        return exit_codes.SUCCESS
    if "version" in parsed.switches:
        console.print(f"couch-harness {__version__}", markup=False, highlight=False)
        return exit_codes.SUCCESS

    configure_logging(verbose="verbose" in parsed.switches)

    if parsed.command == "doctor":
        return _handle_doctor(settings)

    options = resolve_options(apply_defaults(parsed))
    logger.debug(
        "platform=%s backend=%s flags=%s",
        options.platform.value,
        options.backend.value,
        list(options.pass_through),
    )

    if options.dry_run:
        return _handle_dry_run(options, settings)
    return _handle_run(options, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except HarnessError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
