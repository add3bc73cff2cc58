# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/resolver/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Annotation resolver: ``@report``, ``@log`` and ``group(...)`` markers.

Markers are resolved once, when the decorated function is defined, by rewriting
its syntax tree. The static checker in `scopereport.resolver.static` runs the same
rewriting pass over unimported source files.
"""

from __future__ import annotations

from scopereport.resolver.decorators import RootSpec, log, report
from scopereport.resolver.markers import MarkerKind, group
from scopereport.resolver.static import check_path, check_source
from scopereport.resolver.templates import TemplateError, compile_template

__all__ = [
    "MarkerKind",
    "RootSpec",
    "TemplateError",
    "check_path",
    "check_source",
    "compile_template",
    "group",
    "log",
    "report",
]
