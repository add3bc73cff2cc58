# topmark:header:start
#
#   project      : ScopeReport
#   file         : options.py
#   file_relpath : src/scopereport/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options and their resolution logic.

Centralizes reusable options (verbosity, color) so commands and groups can stay
thin.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

import click

from scopereport.cli.errors import ScopereportUsageError
from scopereport.config.logging import TRACE_LEVEL
from scopereport.rendering.color import ColorMode

R = TypeVar("R")

#: Click context settings shared by all commands.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output level from the ``-v`` / ``-q`` counts.

    Args:
        verbose_count: Number of times ``-v`` was passed.
        quiet_count: Number of times ``-q`` was passed.

    Returns:
        The level as a `logging` level number: TRACE (-vvv), DEBUG (-vv), INFO (-v),
        ERROR (-q) or WARNING (default).

    Raises:
        ScopereportUsageError: If both verbose and quiet flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise ScopereportUsageError(
            "The '--verbose' and '--quiet' options are mutually exclusive."
        )
    if verbose_count >= 3:
        return TRACE_LEVEL
    if verbose_count == 2:
        return logging.DEBUG
    if verbose_count == 1:
        return logging.INFO
    if quiet_count >= 1:
        return logging.ERROR
    return logging.WARNING


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return how many steps above the default the program output is (0 = terse)."""
    level = int(ctx.obj.get("verbosity_level", logging.WARNING)) if ctx.obj else logging.WARNING
    if level >= logging.WARNING:
        return 0
    if level >= logging.INFO:
        return 1
    return 2


def common_verbose_options(f: Callable[..., R]) -> Callable[..., R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` (counted, mutually exclusive)."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress output.",
    )(f)
    return f


def common_color_options(f: Callable[..., R]) -> Callable[..., R]:
    """Add ``--color {auto,always,never}`` and ``--no-color``."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        callback=lambda _ctx, _param, value: ColorMode(value) if value else None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f
