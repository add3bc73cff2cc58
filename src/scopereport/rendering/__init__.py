# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of finished reports.

This package turns a root scope's recorded actions into lines of text and writes
them to a sink. It is kept free of scope bookkeeping.

Public modules:
    - scopereport.rendering.color
    - scopereport.rendering.colored_enum
    - scopereport.rendering.theme
    - scopereport.rendering.sinks
    - scopereport.rendering.renderer
"""

from __future__ import annotations
