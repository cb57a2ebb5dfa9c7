"""Command-line scanning, defaulting and validation.

The harness keeps the historical single-dash option syntax
(``-couch couchdb2.0 -platform android -Dfoo=bar``) which ``argparse``
cannot express cleanly, so tokens are classified and scanned here with
a small two-state machine.

Guarantees
----------
* Pure functions: no I/O, no ``print()``, no global state.
* Malformed input raises :class:`~couch_harness.exceptions.ArgumentError`
  before any external command is run.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from couch_harness.core.models import (
    Backend,
    BuildInvocation,
    HarnessOptions,
    ParsedOptions,
    Platform,
)
from couch_harness.exceptions import (
    ArgumentError,
    UnknownBackendError,
    UnknownPlatformError,
)

PASS_THROUGH_MARKER: str = "-D"
SWITCH_MARKER: str = "--"
OPTION_MARKER: str = "-"

KNOWN_OPTIONS: frozenset[str] = frozenset({"couch", "platform"})
KNOWN_SWITCHES: frozenset[str] = frozenset({"help", "version", "dry-run", "verbose"})
COMMANDS: frozenset[str] = frozenset({"doctor"})

DEFAULTS: dict[str, str] = {
    "platform": Platform.JAVA.value,
    "couch": Backend.COUCHDB_16.flag,
}

# Connection properties replaced when targeting a local Cloudant instance.
LOCAL_CONNECTION_KEYS: frozenset[str] = frozenset({
    "test.couch.username",
    "test.couch.password",
    "test.couch.host",
    "test.couch.port",
})

LOCAL_PORT: int = 8080

LOCAL_REPLACEMENT_FLAGS: tuple[str, ...] = (
    "-Dtest.couch.username=admin",
    "-Dtest.couch.password=pass",
    "-Dtest.couch.host=localhost",
    f"-Dtest.couch.port={LOCAL_PORT}",
    "-Dtest.couch.ignore.auth.headers=true",
    "-Dtest.couch.ignore.compaction=true",
)

_BUILD_TARGETS: dict[Platform, BuildInvocation] = {
    Platform.JAVA: BuildInvocation(
        targets=("clean", "check", "integrationTest"),
    ),
    Platform.ANDROID: BuildInvocation(
        targets=("clean", "installStandardTestDebug", "waitForTestAppToFinish"),
        build_file="AndroidTest/build.gradle",
    ),
}


# ---------------------------------------------------------------------------
# Token classification
# ---------------------------------------------------------------------------

class TokenKind(Enum):
    PASS_THROUGH = "pass-through"
    SWITCH = "switch"
    OPTION = "option"
    WORD = "word"


def classify(token: str) -> TokenKind:
    """Return the lexical kind of a single argument token."""
    if token.startswith(PASS_THROUGH_MARKER):
        return TokenKind.PASS_THROUGH
    if token.startswith(SWITCH_MARKER) and len(token) > len(SWITCH_MARKER):
        return TokenKind.SWITCH
    if token.startswith(OPTION_MARKER) and len(token) > len(OPTION_MARKER):
        return TokenKind.OPTION
    return TokenKind.WORD


def property_name(flag: str) -> str:
    """Return the property name of a ``-Dname=value`` flag."""
    body = flag[len(PASS_THROUGH_MARKER):]
    return body.split("=", 1)[0]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def parse_args(argv: Sequence[str]) -> ParsedOptions:
    """Scan *argv* left to right into a :class:`ParsedOptions`.

    Every ``-name`` token consumes exactly the following token as its
    value.  ``-D`` flags and ``--switches`` consume nothing.  A leading
    ``doctor`` word selects the diagnostics command.

    Raises
    ------
    ArgumentError
        When an option is followed by another flag or by end of input,
        when an option or switch is unknown, or when a stray word appears.
    """
    values: dict[str, str] = {}
    pass_through: list[str] = []
    switches: set[str] = set()
    command: str | None = None

    pending: str | None = None  # option name awaiting its value

    for index, token in enumerate(argv):
        kind = classify(token)

        if pending is not None:
            if kind is not TokenKind.WORD:
                raise ArgumentError(
                    f"Option -{pending} expects a value, got {token!r}.",
                    hint=f"Usage: -{pending} <value>",
                )
            values[pending] = token
            pending = None
            continue

        if kind is TokenKind.PASS_THROUGH:
            pass_through.append(token)
        elif kind is TokenKind.SWITCH:
            name = token[len(SWITCH_MARKER):]
            if name not in KNOWN_SWITCHES:
                raise ArgumentError(f"Unknown switch {token!r}.")
            switches.add(name)
        elif kind is TokenKind.OPTION:
            name = token[len(OPTION_MARKER):]
            if name not in KNOWN_OPTIONS:
                raise ArgumentError(
                    f"Unknown option {token!r}.",
                    hint="Supported options: -couch, -platform, -D<name>=<value>",
                )
            pending = name
        elif index == 0 and token in COMMANDS:
            command = token
        else:
            raise ArgumentError(f"Unexpected argument {token!r}.")

    if pending is not None:
        raise ArgumentError(
            f"Option -{pending} expects a value.",
            hint=f"Usage: -{pending} <value>",
        )

    return ParsedOptions(
        values=values,
        pass_through=tuple(pass_through),
        switches=frozenset(switches),
        command=command,
    )


def apply_defaults(parsed: ParsedOptions) -> ParsedOptions:
    """Fill in ``platform`` and ``couch`` when they were not given.

    Present values are kept even when empty.
    """
    values = dict(parsed.values)
    for key, default in DEFAULTS.items():
        values.setdefault(key, default)
    return ParsedOptions(
        values=values,
        pass_through=parsed.pass_through,
        switches=parsed.switches,
        command=parsed.command,
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def resolve_options(parsed: ParsedOptions) -> HarnessOptions:
    """Validate defaulted options into typed :class:`HarnessOptions`.

    The local-mode rewrite of the pass-through flags is applied here so
    that the result is final.

    Raises
    ------
    UnknownPlatformError
        If ``platform`` is not ``java`` or ``android``.
    UnknownBackendError
        If ``couch`` is not a supported backend.
    """
    platform_token = parsed.platform or ""
    try:
        platform = Platform(platform_token)
    except ValueError:
        raise UnknownPlatformError(
            f"Unknown platform {platform_token!r}.",
            hint=_choices(p.value for p in Platform),
        ) from None

    backend_token = parsed.backend or ""
    backend = Backend.from_token(backend_token)
    if backend is None:
        raise UnknownBackendError(
            f"Unknown couch backend {backend_token!r}.",
            hint=_choices(b.flag for b in Backend),
        )

    pass_through = parsed.pass_through
    if backend.is_local:
        pass_through = adjust_for_local_backend(pass_through)

    return HarnessOptions(
        platform=platform,
        backend=backend,
        pass_through=pass_through,
        dry_run="dry-run" in parsed.switches,
        verbose="verbose" in parsed.switches,
    )


def adjust_for_local_backend(pass_through: Iterable[str]) -> tuple[str, ...]:
    """Point the connection flags at the local Cloudant instance.

    Drops user-supplied username/password/host/port flags and appends
    :data:`LOCAL_REPLACEMENT_FLAGS`.  Other flags keep their order.
    """
    kept = tuple(
        flag for flag in pass_through
        if property_name(flag) not in LOCAL_CONNECTION_KEYS
    )
    return kept + LOCAL_REPLACEMENT_FLAGS


def build_invocation(platform: Platform, flags: Sequence[str]) -> BuildInvocation:
    """Return the Gradle invocation for *platform* forwarding *flags*."""
    base = _BUILD_TARGETS[platform]
    return BuildInvocation(
        targets=base.targets,
        flags=tuple(flags),
        build_file=base.build_file,
    )


def _choices(names: Iterable[str]) -> str:
    return "Choose one of: " + ", ".join(names)
