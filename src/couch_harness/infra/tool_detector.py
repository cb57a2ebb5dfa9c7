"""Infrastructure: detection of the external tools the harness drives.

Rules
-----
* Detection via :func:`shutil.which` and ``stat`` only, no subprocess.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import os
import platform
import shutil
from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a tool detection probe.

    Attributes
    ----------
    found : bool
        Whether the tool was located.
    path : Path | None
        Absolute path to the tool, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested remedies.  Empty when the tool is usable.
    """

    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_docker() -> ToolStatus:
    """Probe PATH for a ``docker`` executable."""
    result = shutil.which("docker")

    if result is not None:
        resolved = Path(result).resolve()
        return ToolStatus(
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return ToolStatus(
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_docker_install_commands(),
    )


def detect_gradle_wrapper(wrapper: Path) -> ToolStatus:
    """Check that the Gradle wrapper script exists.

    A wrapper without the execute bit still counts as found; the
    orchestrator fixes permissions before every build.
    """
    if not wrapper.is_file():
        return ToolStatus(
            found=False,
            path=None,
            version_hint="not found",
            install_commands=(
                "cd <project root containing gradlew>",
                "gradle wrapper",
            ),
        )

    resolved = wrapper.resolve()
    hint = "executable" if os.access(resolved, os.X_OK) else "not executable (fixed on run)"
    return ToolStatus(
        found=True,
        path=resolved,
        version_hint=hint,
        install_commands=(),
    )


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _docker_install_commands() -> tuple[str, ...]:
    """Return docker install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return ("winget install Docker.DockerDesktop",)
    if system == "linux":
        return (
            "sudo apt install docker.io",
            "sudo dnf install docker",
        )
    if system == "darwin":
        return ("brew install --cask docker",)
    return ("Please install docker from https://docs.docker.com/get-docker/",)
