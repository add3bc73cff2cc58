# topmark:header:start
#
#   project      : ScopeReport
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running ScopeReport in a controlled working directory.

`run_cli_in()` changes the process working directory to the given directory before
invoking the Click CLI, so configuration discovery and relative paths resolve
against the test's project directory rather than the repository.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Sequence

from click.testing import CliRunner, Result

from scopereport.cli.exit_codes import ExitCode
from scopereport.cli.main import cli

if TYPE_CHECKING:
    from pathlib import Path


def run_cli_in(tmp_path: Path, argv: str | Sequence[str] | None) -> Result:
    """Invoke the CLI with ``tmp_path`` as the working directory.

    Args:
        tmp_path (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["check", "."]``.

    Returns:
        Result: The `click.testing.Result` produced by `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, argv)
    finally:
        os.chdir(cwd)


def run_cli(argv: str | Sequence[str] | None) -> Result:
    """Invoke the CLI in the current working directory.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector.

    Returns:
        Result: The `click.testing.Result` of the invocation.
    """
    return CliRunner().invoke(cli, argv)


def assert_SUCCESS(result: Result) -> None:  # noqa: N802
    """Assert that a CLI invocation exited with `ExitCode.SUCCESS`.

    Args:
        result (Result): The invocation result.
    """
    assert result.exit_code == ExitCode.SUCCESS, result.output
