# topmark:header:start
#
#   project      : ScopeReport
#   file         : errors.py
#   file_relpath : src/scopereport/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the ScopeReport CLI.

Raise these in CLI commands to signal errors with standardized messages and exit
codes. They prefer the project console if one is stored in the Click context and
fall back to Click's default display otherwise.
"""

from __future__ import annotations

from typing import IO, Any

import click

from scopereport.cli.exit_codes import ExitCode


class ScopereportCliError(click.ClickException):
    """Base class for all ScopeReport CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(self.format_message(), fg="bright_red"))
                return
        super().show(file)


class ScopereportUsageError(ScopereportCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class ScopereportFileNotFoundError(ScopereportCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class ScopereportEncodingError(ScopereportCliError):
    """Error when a source file cannot be decoded."""

    exit_code = ExitCode.ENCODING_ERROR


class ScopereportIOError(ScopereportCliError):
    """Error for I/O errors reading files."""

    exit_code = ExitCode.IO_ERROR
