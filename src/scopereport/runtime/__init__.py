# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/runtime/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Runtime engine: per-thread slots, scopes and the leaf logging API.

Rewritten functions reach this module through a closure variable, so everything
the resolver emits calls into it (`open_root`, `open_nested`, `evaluate_nested`).
"""

from __future__ import annotations

from scopereport.runtime.context import ContextSlot, current_slot, reset_current_slot
from scopereport.runtime.leaf import absorb, absorb_errors, error, fail, info, warn
from scopereport.runtime.scope import Message, Scope, evaluate_nested, open_nested, open_root

__all__ = [
    "ContextSlot",
    "Message",
    "Scope",
    "absorb",
    "absorb_errors",
    "current_slot",
    "error",
    "evaluate_nested",
    "fail",
    "info",
    "open_nested",
    "open_root",
    "reset_current_slot",
    "warn",
]
