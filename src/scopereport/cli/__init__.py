# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport CLI package.

The console script entry point is defined in ``pyproject.toml`` as::

    [project.scripts]
    scopereport = "scopereport.cli.main:cli"

All subcommands live in [`scopereport.cli.commands`][].
"""

from __future__ import annotations

__all__: list[str] = []
# Do NOT import .main or commands at module import time
