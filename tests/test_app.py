"""End-to-end tests for the CLI (cli/app.py).

Every external process goes through a single mocked
:func:`subprocess.run`, dispatched on the executable name, so the real
adapters run with no docker or gradle present.

Coverage:
* Build exit code is the process exit code; teardown always attempted.
* Container start failure exits nonzero before the build.
* Local backend never calls docker and rewrites connection flags.
* Dry run executes nothing.
* The ``cli()`` error boundary maps errors to exit codes.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from couch_harness.cli import exit_codes
from couch_harness.cli.app import cli, main
from couch_harness.core.options import LOCAL_REPLACEMENT_FLAGS
from couch_harness.core.settings import HarnessSettings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_run(
    *, docker_codes: dict[str, int] | None = None, build_code: int = 0,
) -> Callable[..., subprocess.CompletedProcess[bytes]]:
    """Return a ``subprocess.run`` stand-in keyed on the docker sub-command."""
    codes = docker_codes or {}

    def run(command: list[str], **_kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        if command[0] == "docker":
            return subprocess.CompletedProcess(command, codes.get(command[1], 0))
        return subprocess.CompletedProcess(command, build_code)

    return run


def _commands(mock_run: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in mock_run.call_args_list]


def _docker_subcommands(mock_run: MagicMock) -> list[str]:
    return [cmd[1] for cmd in _commands(mock_run) if cmd[0] == "docker"]


def _gradle_commands(mock_run: MagicMock) -> list[list[str]]:
    return [cmd for cmd in _commands(mock_run) if cmd[0] != "docker"]


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------

class TestRun:
    @patch("subprocess.run")
    def test_build_exit_code_is_propagated(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        mock_run.side_effect = _fake_run(build_code=7)

        code = main(["-couch", "couchdb2.0"], settings)

        assert code == 7
        assert _docker_subcommands(mock_run) == ["run", "stop", "rm"]

    @patch("subprocess.run")
    def test_java_command_line(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        mock_run.side_effect = _fake_run()

        assert main(["-Dfoo=1", "-Dbar=2"], settings) == exit_codes.SUCCESS

        assert _commands(mock_run)[0] == [
            "docker", "run", "-p", "5984:15984", "-d", "--name", "couchdb", "couchdb1.6",
        ]
        assert _gradle_commands(mock_run) == [[
            str(settings.wrapper_path),
            "-Dfoo=1", "-Dbar=2", "clean", "check", "integrationTest",
        ]]

    @patch("subprocess.run")
    def test_wrapper_is_made_executable(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        mock_run.side_effect = _fake_run()
        main([], settings)
        assert settings.wrapper_path.stat().st_mode & 0o111

    @patch("subprocess.run")
    def test_start_failure_skips_build(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        from couch_harness.exceptions import ContainerStartError

        mock_run.side_effect = _fake_run(docker_codes={"run": 125})

        with pytest.raises(ContainerStartError):
            main([], settings)

        assert _docker_subcommands(mock_run) == ["run", "rm"]
        assert _gradle_commands(mock_run) == []

    @patch("subprocess.run")
    def test_teardown_failure_keeps_exit_code(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        mock_run.side_effect = _fake_run(docker_codes={"stop": 1, "rm": 1}, build_code=0)
        assert main([], settings) == exit_codes.SUCCESS
        assert _docker_subcommands(mock_run) == ["run", "stop", "rm"]

    @patch("subprocess.run")
    def test_local_backend_skips_docker(
        self, mock_run: MagicMock, settings: HarnessSettings,
    ) -> None:
        mock_run.side_effect = _fake_run(build_code=4)

        code = main(
            ["-couch", "cloudantlocal", "-platform", "android", "-Dtest.couch.host=db"],
            settings,
        )

        assert code == 4
        assert _docker_subcommands(mock_run) == []
        (gradle,) = _gradle_commands(mock_run)
        assert gradle[1:3] == ["-b", "AndroidTest/build.gradle"]
        assert "-Dtest.couch.host=db" not in gradle
        assert gradle[3:9] == list(LOCAL_REPLACEMENT_FLAGS)


# ---------------------------------------------------------------------------
# Dry run
# ---------------------------------------------------------------------------

class TestDryRun:
    @patch("subprocess.run")
    def test_nothing_is_executed(
        self,
        mock_run: MagicMock,
        settings: HarnessSettings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="couch_harness"):
            code = main(["--dry-run", "-Dfoo=1"], settings)

        assert code == exit_codes.SUCCESS
        mock_run.assert_not_called()
        would_run = [r.getMessage() for r in caplog.records if "Would run" in r.getMessage()]
        assert len(would_run) == 4
        assert "docker run -p 5984:15984" in would_run[0]
        assert "-Dfoo=1 clean check integrationTest" in would_run[1]

    @patch("subprocess.run")
    def test_local_dry_run_lists_only_build(
        self,
        mock_run: MagicMock,
        settings: HarnessSettings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="couch_harness"):
            main(["--dry-run", "-couch", "cloudantlocal"], settings)

        mock_run.assert_not_called()
        would_run = [r.getMessage() for r in caplog.records if "Would run" in r.getMessage()]
        assert len(would_run) == 1
        assert "docker" not in would_run[0]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _exit_code(self, monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> int:
        monkeypatch.setattr("sys.argv", ["couch-harness", *argv])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return exc_info.value.code  # type: ignore[return-value]

    @patch("subprocess.run")
    def test_unknown_platform(
        self,
        mock_run: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._exit_code(monkeypatch, ["-platform", "ios"])

        assert code == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()
        err = capsys.readouterr().err
        assert "Unknown platform" in err
        assert "Hint:" in err

    @patch("subprocess.run")
    def test_missing_value(
        self, mock_run: MagicMock, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        assert self._exit_code(monkeypatch, ["-couch"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()

    @patch("subprocess.run")
    def test_start_failure_exits_nonzero(
        self,
        mock_run: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        settings: HarnessSettings,
    ) -> None:
        monkeypatch.chdir(settings.project_dir)
        mock_run.side_effect = _fake_run(docker_codes={"run": 1})

        assert self._exit_code(monkeypatch, []) == exit_codes.GENERAL_ERROR
        assert _gradle_commands(mock_run) == []

    @patch("subprocess.run")
    def test_build_code_becomes_exit_status(
        self,
        mock_run: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        settings: HarnessSettings,
    ) -> None:
        monkeypatch.chdir(settings.project_dir)
        mock_run.side_effect = _fake_run(build_code=7)

        assert self._exit_code(monkeypatch, []) == 7

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from couch_harness.cli import app as app_module

        def interrupted(*_args: Any) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", interrupted)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from couch_harness.cli import app as app_module

        def broken(*_args: Any) -> int:
            raise RuntimeError("boom")

        monkeypatch.setattr(app_module, "main", broken)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR
