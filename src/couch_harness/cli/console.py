"""CLI console and logging helpers.

All user-facing output goes through a single Rich console bound to
stderr, so that stdout stays free for the build tool's own output.
Log records from every layer are rendered through the same console.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER: str = "couch_harness"

console = Console(stderr=True)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
	"""Attach a :class:`RichHandler` to the package logger.

	INFO by default; DEBUG (including every external command line) when
	*verbose* is set.  Calling this more than once replaces the handler.
	"""
	logger = logging.getLogger(PACKAGE_LOGGER)
	for handler in list(logger.handlers):
		if isinstance(handler, RichHandler):
			logger.removeHandler(handler)

	handler = RichHandler(
		console=console,
		show_path=False,
		show_time=verbose,
		markup=False,
	)
	handler.setFormatter(logging.Formatter("%(message)s"))
	logger.addHandler(handler)
	logger.setLevel(logging.DEBUG if verbose else logging.INFO)
	return logger
