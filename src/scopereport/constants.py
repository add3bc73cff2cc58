# topmark:header:start
#
#   project      : ScopeReport
#   file         : constants.py
#   file_relpath : src/scopereport/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    SCOPEREPORT_VERSION: str = get_version("scopereport")
except PackageNotFoundError:  # running from a source checkout
    SCOPEREPORT_VERSION = "0.0.0"

# Config discovery
PYPROJECT_TOML_NAME: str = "pyproject.toml"
SCOPEREPORT_TOML_NAME: str = "scopereport.toml"
PYPROJECT_SECTION: str = "tool.scopereport"

# Environment variables
ENV_LOG_LEVEL: str = "SCOPEREPORT_LOG_LEVEL"
ENV_FRAME: str = "SCOPEREPORT_FRAME"
ENV_GLYPHS: str = "SCOPEREPORT_GLYPHS"
ENV_COLOR: str = "SCOPEREPORT_COLOR"

# Name under which rewritten functions reach the runtime
RUNTIME_NAME: str = "__scopereport__"
ROOT_ARGS_NAME: str = "__scopereport_root_args__"

# Columns reserved for the frame borders and margin when sizing to the terminal
FRAME_MARGIN: int = 4

ELLIPSIS: str = "..."
