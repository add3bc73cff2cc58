# topmark:header:start
#
#   project      : ScopeReport
#   file         : context.py
#   file_relpath : src/scopereport/runtime/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-thread recording state.

Each thread owns exactly one `ContextSlot`: the action buffer of its innermost open
scope and the *active* flag (true while a root scope is open). Scopes move the buffer
in and out with `ContextSlot.take_actions` / `ContextSlot.replace_actions`, so at any
moment exactly one owner holds the live list and no locking is needed.

Slots are never shared: a new thread (or an executor worker) starts idle with an
empty buffer. Callers scheduling cooperative tasks on one thread can create their
own `ContextSlot` and pass it explicitly as ``slot=`` to the scope and leaf
functions.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scopereport.actions.model import Action


@dataclass
class ContextSlot:
    """Recording state of one execution context.

    Attributes:
        actions: Buffer of the innermost open scope, in recording order.
        active: True while a root scope is open; leaf calls buffer instead of printing.
        depth: Number of currently open scopes.
    """

    actions: list[Action] = field(default_factory=lambda: [])
    active: bool = False
    depth: int = 0

    def take_actions(self) -> list[Action]:
        """Remove and return the live buffer, leaving an empty one in its place."""
        actions = self.actions
        self.actions = []
        return actions

    def replace_actions(self, actions: list[Action]) -> None:
        """Install ``actions`` as the live buffer."""
        self.actions = actions

    def swap_active(self, active: bool) -> bool:
        """Set the active flag and return its previous value."""
        previous = self.active
        self.active = active
        return previous

    def record(self, action: Action) -> None:
        """Append ``action`` to the live buffer."""
        self.actions.append(action)


class _ThreadSlots(threading.local):
    slot: ContextSlot

    def __init__(self) -> None:
        self.slot = ContextSlot()


_slots = _ThreadSlots()


def current_slot() -> ContextSlot:
    """Return the calling thread's slot."""
    return _slots.slot


def reset_current_slot() -> ContextSlot:
    """Replace the calling thread's slot with a fresh one and return the old slot."""
    previous = _slots.slot
    _slots.slot = ContextSlot()
    return previous
