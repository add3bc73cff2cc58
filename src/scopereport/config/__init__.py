# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for ScopeReport.

Settings come from built-in defaults, ``[tool.scopereport]`` in ``pyproject.toml``
(or a ``scopereport.toml``), ``SCOPEREPORT_*`` environment variables and explicit
calls to `scopereport.config.state.configure`, in increasing order of precedence.

Public modules:
    - scopereport.config.keys
    - scopereport.config.io
    - scopereport.config.model
    - scopereport.config.state
    - scopereport.config.logging
"""

from __future__ import annotations
