"""Allow ``python -m couch_harness`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m couch_harness`` behaves identically to the
``couch-harness`` console script.
"""

from __future__ import annotations

from couch_harness.cli.app import cli

if __name__ == "__main__":
    cli()
