"""Custom exception hierarchy for couch-harness.

All exceptions that cross layer boundaries must inherit from
:class:`HarnessError`.  Raw ``OSError``/``subprocess`` failures must
NEVER propagate beyond the infrastructure layer; they must be caught
and re-raised as a typed subclass defined here (or reported as a
failed result).

Hierarchy
---------
HarnessError
├── ArgumentError
│   ├── UnknownPlatformError
│   └── UnknownBackendError
├── ContainerStartError
└── BuildDriverError
"""

from __future__ import annotations


class HarnessError(Exception):
    """Base exception for all couch-harness errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class ArgumentError(HarnessError):
    """Raised when the command line is malformed."""


class UnknownPlatformError(ArgumentError):
    """Raised when ``-platform`` names something other than java/android."""


class UnknownBackendError(ArgumentError):
    """Raised when ``-couch`` names an unsupported database backend."""


# --- External collaborators ------------------------------------------------

class ContainerStartError(HarnessError):
    """Raised when the database container could not be started."""


class BuildDriverError(HarnessError):
    """Raised when the Gradle wrapper is missing or cannot be launched."""
