"""``couch-harness doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can run the integration build.

This module lives in the CLI layer; it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from rich.table import Table

from couch_harness.cli import exit_codes
from couch_harness.cli.console import console
from couch_harness.core.settings import HarnessSettings
from couch_harness.infra.tool_detector import detect_docker, detect_gradle_wrapper
from couch_harness.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _docker_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the docker row.

    A missing docker is only a warning: ``-couch cloudantlocal`` runs
    without it.
    """
    status_obj = detect_docker()
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "docker", path_str, "[green]OK[/green]"
    return "docker", "not found", "[yellow]WARN[/yellow]"


def _gradle_wrapper_check(settings: HarnessSettings) -> tuple[str, str, str]:
    """Return (label, value, status) for the gradle wrapper row."""
    status_obj = detect_gradle_wrapper(settings.wrapper_path)
    if status_obj.found:
        return "gradlew", status_obj.version_hint, "[green]OK[/green]"
    return "gradlew", f"not found in {settings.project_dir}", "[red]FAIL[/red]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: HarnessSettings) -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = [
        ("couch-harness", __version__, "[green]OK[/green]"),
        _python_version_check(),
        _docker_check(),
        _gradle_wrapper_check(settings),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    table = Table(
        title="couch-harness doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    docker_status = detect_docker()
    if not docker_status.found:
        console.print("[yellow]docker is not installed.[/yellow]")
        console.print("Only -couch cloudantlocal can run. Install docker with one of:\n")
        for cmd in docker_status.install_commands:
            console.print(f"  [bold]{cmd}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
