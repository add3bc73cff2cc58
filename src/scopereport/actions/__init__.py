# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/actions/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Action tree model.

A finished report is an ordered sequence of actions: `Leaf` messages tagged with a
`Severity`, and `Group` nodes holding the actions recorded inside a closed nested
scope.
"""

from __future__ import annotations

from scopereport.actions.model import (
    Action,
    Group,
    Leaf,
    Severity,
    count_by_severity,
    iter_leaves,
)

__all__ = [
    "Action",
    "Group",
    "Leaf",
    "Severity",
    "count_by_severity",
    "iter_leaves",
]
