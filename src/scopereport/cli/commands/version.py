# topmark:header:start
#
#   project      : ScopeReport
#   file         : version.py
#   file_relpath : src/scopereport/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport `version` command.

Prints the ScopeReport version installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scopereport.cli.options import get_effective_verbosity
from scopereport.constants import SCOPEREPORT_VERSION

if TYPE_CHECKING:
    from scopereport.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of ScopeReport.",
)
def version_command() -> None:
    """Show the current version of ScopeReport."""
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if get_effective_verbosity(ctx) > 0:
        console.print(console.styled("ScopeReport version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(SCOPEREPORT_VERSION, bold=True)}")
    else:
        console.print(console.styled(SCOPEREPORT_VERSION, bold=True))
