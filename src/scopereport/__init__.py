# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport: collect diagnostics from nested, titled code regions into one report.

```python
from scopereport import group, info, log, report, warn


@report
@log("Importing {path}")
def import_file(path):
    group("Reading")
    rows = read_rows(path)

    for row in rows:
        group("Row {row.id}")
        if not row.valid:
            warn(f"skipping invalid row {row.id}")
```

Messages logged inside ``import_file`` are printed as one framed tree when the
call returns, titled ``Importing ...``; regions that logged nothing are left out.
"""

from __future__ import annotations

from scopereport.actions import Action, Group, Leaf, Severity
from scopereport.config.io import load_config
from scopereport.config.model import ReportConfig
from scopereport.config.state import configure, get_config, get_sink, set_sink
from scopereport.constants import SCOPEREPORT_VERSION
from scopereport.errors import (
    AnnotationDiagnostic,
    AnnotationError,
    ReportFailure,
    ScopeReportError,
)
from scopereport.rendering.color import ColorMode
from scopereport.rendering.sinks import CollectingSink, ConsoleSink, ReportSink, StreamSink
from scopereport.rendering.theme import GlyphSet, Theme
from scopereport.resolver import check_path, check_source, group, log, report
from scopereport.runtime import (
    ContextSlot,
    Scope,
    absorb,
    absorb_errors,
    current_slot,
    error,
    evaluate_nested,
    fail,
    info,
    open_nested,
    open_root,
    warn,
)

__version__ = SCOPEREPORT_VERSION

__all__ = [
    "Action",
    "AnnotationDiagnostic",
    "AnnotationError",
    "CollectingSink",
    "ColorMode",
    "ConsoleSink",
    "ContextSlot",
    "GlyphSet",
    "Group",
    "Leaf",
    "ReportConfig",
    "ReportFailure",
    "ReportSink",
    "Scope",
    "ScopeReportError",
    "Severity",
    "StreamSink",
    "Theme",
    "__version__",
    "absorb",
    "absorb_errors",
    "check_path",
    "check_source",
    "configure",
    "current_slot",
    "error",
    "evaluate_nested",
    "fail",
    "get_config",
    "get_sink",
    "group",
    "info",
    "load_config",
    "log",
    "open_nested",
    "open_root",
    "report",
    "set_sink",
    "warn",
]
