# topmark:header:start
#
#   project      : ScopeReport
#   file         : config.py
#   file_relpath : src/scopereport/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport `config` command group.

  * ``scopereport config dump``: show the effective configuration.
  * ``scopereport config defaults``: show the built-in defaults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scopereport.cli.options import CONTEXT_SETTINGS, get_effective_verbosity
from scopereport.config.io import env_overrides, find_config_file, load_config, to_toml
from scopereport.config.logging import get_logger
from scopereport.config.model import ReportConfig

if TYPE_CHECKING:
    from scopereport.cli.console import ConsoleLike
    from scopereport.config.logging import ScopereportLogger

logger: ScopereportLogger = get_logger(__name__)

_PYPROJECT_OPTION = click.option(
    "--pyproject",
    is_flag=True,
    default=False,
    help="Render as a [tool.scopereport] table for inclusion in pyproject.toml.",
)


@click.group(
    name="config",
    help="Inspect ScopeReport configuration.",
    context_settings=CONTEXT_SETTINGS,
)
def config_command() -> None:
    """Group for configuration-related subcommands.

    This group itself performs no action; use ``dump`` or ``defaults``.
    """


@config_command.command(name="dump", help="Display the effective configuration as TOML.")
@_PYPROJECT_OPTION
def config_dump_command(pyproject: bool) -> None:
    """Display the configuration resolved from files and the environment.

    Args:
        pyproject: If True, nest the values under ``[tool.scopereport]``.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if get_effective_verbosity(ctx) > 0:
        found = find_config_file()
        console.print(f"# Config file: {found[0] if found else '(none)'}")
        overrides = env_overrides()
        if overrides:
            console.print(f"# Environment overrides: {', '.join(sorted(overrides))}")
    console.print(to_toml(load_config(), for_pyproject=pyproject), nl=False)


@config_command.command(name="defaults", help="Display the built-in default configuration.")
@_PYPROJECT_OPTION
def config_defaults_command(pyproject: bool) -> None:
    """Display the built-in default configuration as TOML."""
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    console.print(to_toml(ReportConfig(), for_pyproject=pyproject), nl=False)
