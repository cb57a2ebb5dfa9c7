"""Domain models for couch-harness.

All models are **frozen** dataclasses or enums: immutable value objects
with no behaviour beyond data access and trivial lookups.  They carry
zero I/O and zero dependencies on external packages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------

class Platform(str, Enum):
    """Build target family selected with ``-platform``."""

    JAVA = "java"
    ANDROID = "android"


class Backend(str, Enum):
    """Database backend selected with ``-couch``.

    The enum value is the canonical name; :attr:`flag` is the token
    accepted on the command line and doubles as the container image tag.
    """

    COUCHDB_16 = "couchdb1.6"
    COUCHDB_20 = "couchdb2.0"
    CLOUDANT_REMOTE = "cloudant-remote"
    CLOUDANT_LOCAL = "cloudant-local"

    @property
    def flag(self) -> str:
        return _BACKEND_FLAGS[self]

    @property
    def image(self) -> str:
        """Container image tag passed to ``docker run``."""
        return self.flag

    @property
    def is_local(self) -> bool:
        """Whether the backend is an already-running local instance."""
        return self is Backend.CLOUDANT_LOCAL

    @classmethod
    def from_token(cls, token: str) -> Backend | None:
        """Look up a backend by CLI token or canonical name."""
        for member in cls:
            if token in (member.value, member.flag):
                return member
        return None


_BACKEND_FLAGS: dict[Backend, str] = {
    Backend.COUCHDB_16: "couchdb1.6",
    Backend.COUCHDB_20: "couchdb2.0",
    Backend.CLOUDANT_REMOTE: "cloudantSAAS",
    Backend.CLOUDANT_LOCAL: "cloudantlocal",
}


# ---------------------------------------------------------------------------
# Parsed command line
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedOptions:
    """Raw result of scanning the argument sequence.

    Values are untyped strings at this stage; see
    :func:`~couch_harness.core.options.resolve_options` for validation.
    """

    values: Mapping[str, str] = field(default_factory=dict)
    """Option name (leading ``-`` stripped) → value."""

    pass_through: tuple[str, ...] = ()
    """``-D`` flags in the order they were given."""

    switches: frozenset[str] = frozenset()
    """Meta switches (``--dry-run``, ``--verbose`` …) without dashes."""

    command: str | None = None
    """Leading command word, e.g. ``doctor``."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def platform(self) -> str | None:
        return self.values.get("platform")

    @property
    def backend(self) -> str | None:
        return self.values.get("couch")


@dataclass(frozen=True, slots=True)
class HarnessOptions:
    """Validated options driving one orchestrator run."""

    platform: Platform
    backend: Backend
    pass_through: tuple[str, ...] = ()
    dry_run: bool = False
    verbose: bool = False


# ---------------------------------------------------------------------------
# External invocations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PortMapping:
    """A ``host:container`` port publication for ``docker run -p``."""

    host: int
    container: int

    def __str__(self) -> str:
        return f"{self.host}:{self.container}"


@dataclass(frozen=True, slots=True)
class BuildInvocation:
    """Arguments for one Gradle wrapper run.

    The wrapper is called as ``gradlew [-b build_file] *flags *targets``.
    """

    targets: tuple[str, ...]
    flags: tuple[str, ...] = ()
    build_file: str | None = None

    @property
    def arguments(self) -> tuple[str, ...]:
        prefix = ("-b", self.build_file) if self.build_file else ()
        return (*prefix, *self.flags, *self.targets)
