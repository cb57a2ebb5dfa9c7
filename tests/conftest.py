"""Shared pytest fixtures and configuration for the couch-harness test suite.

Guidelines
----------
* No real docker or gradle invocations in any test.
* ``subprocess.run`` must be mocked at the infra boundary.
* Core tests must be pure, with no side effects.
* Tests must not depend on OS state beyond ``tmp_path``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from couch_harness.cli.console import PACKAGE_LOGGER
from couch_harness.core.settings import HarnessSettings


@pytest.fixture
def settings(tmp_path: Path) -> HarnessSettings:
    """Settings rooted in a temporary project directory with a gradlew script."""
    wrapper = tmp_path / "gradlew"
    wrapper.write_text("#!/bin/sh\nexit 0\n")
    wrapper.chmod(0o644)
    return HarnessSettings(project_dir=tmp_path)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so caplog keeps working between tests."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
