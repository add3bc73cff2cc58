# topmark:header:start
#
#   project      : ScopeReport
#   file         : scope.py
#   file_relpath : src/scopereport/runtime/scope.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Recording scopes.

A `Scope` is opened when a marked region begins and closed exactly once when it
ends. Opening swaps the slot's buffer for an empty one and keeps the old buffer
(the parent's) until close:

- a **root** scope also switches the slot to buffering; on close it renders its
  actions as one report and restores the parent's buffer and active flag;
- a **nested** scope leaves the active flag alone; on close it restores the
  parent's buffer and, only if it recorded anything, appends a `Group` with its
  actions to it.

Scopes are context managers, so closing happens on every exit path:

```python
with open_root("Import"):
    with open_nested(lambda: f"Reading {path}"):
        warn("empty line skipped")
```

The message may be a plain string or a zero-argument callable; callables are only
evaluated at close, and a nested scope that recorded nothing never evaluates it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar, Union

from scopereport.actions.model import Group, count_by_severity
from scopereport.config.logging import TRACE_LEVEL, get_logger
from scopereport.config.state import get_sink, get_theme
from scopereport.rendering.renderer import render_report
from scopereport.runtime.context import current_slot

if TYPE_CHECKING:
    from types import TracebackType

    from scopereport.actions.model import Action
    from scopereport.config.logging import ScopereportLogger
    from scopereport.rendering.sinks import ReportSink
    from scopereport.runtime.context import ContextSlot

logger: ScopereportLogger = get_logger(__name__)

T = TypeVar("T")

Message = Union[str, Callable[[], str]]


class Scope:
    """An open recording region.

    Use `open_root` / `open_nested` (or the ``@log`` / ``group(...)`` annotations)
    rather than instantiating this class directly.

    Args:
        message (Message): Title, or a callable producing it at close.
        root (bool): Render on close instead of folding into the parent.
        slot (ContextSlot | None): Explicit context handle; defaults to the calling
            thread's slot.
        sink (ReportSink | None): Root scopes only; defaults to the configured sink.
    """

    def __init__(
        self,
        message: Message,
        *,
        root: bool,
        slot: ContextSlot | None = None,
        sink: ReportSink | None = None,
    ) -> None:
        self._message = message
        self._root = root
        self._sink = sink
        self._slot: ContextSlot = slot if slot is not None else current_slot()
        self._saved_actions: list[Action] = self._slot.take_actions()
        if root:
            self._saved_active: bool = self._slot.swap_active(True)
        else:
            self._saved_active = self._slot.active
        self._slot.depth += 1
        self._depth = self._slot.depth
        self._closed = False
        logger.trace("Opened %s scope at depth %d", self.kind, self._depth)

    @property
    def kind(self) -> str:
        """``"root"`` or ``"nested"``."""
        return "root" if self._root else "nested"

    @property
    def root(self) -> bool:
        """Whether this scope renders on close."""
        return self._root

    @property
    def closed(self) -> bool:
        """Whether `close` already ran."""
        return self._closed

    def format_message(self) -> str:
        """Return the scope's title, evaluating a callable message."""
        message = self._message
        if callable(message):
            return str(message())
        return message

    def _closing_title(self) -> str:
        """Return the title for close; a title that fails to format is replaced."""
        try:
            return self.format_message()
        except Exception as exc:
            logger.warning(
                "Formatting the title of a %s scope failed: %s: %s",
                self.kind,
                type(exc).__name__,
                exc,
            )
            return f"<title failed: {type(exc).__name__}>"

    def close(self) -> None:
        """Close the scope; later calls do nothing.

        A root always renders and a nested scope always folds what it recorded: a
        title that raises is logged and replaced by ``<title failed: ExcType>``. The
        slot's buffer and active flag are restored even if rendering raises.
        """
        if self._closed:
            return
        self._closed = True

        slot = self._slot
        if slot.depth != self._depth:
            logger.warning(
                "Closing %s scope at depth %d while %d scopes are open; scopes must close "
                "in reverse order of opening",
                self.kind,
                self._depth,
                slot.depth,
            )
        slot.depth = self._depth - 1

        actions = slot.take_actions()
        parent = self._saved_actions
        self._saved_actions = []
        if logger.isEnabledFor(TRACE_LEVEL):
            logger.trace(
                "Closing %s scope at depth %d (%d actions, leaves by severity: %s)",
                self.kind,
                self._depth,
                len(actions),
                count_by_severity(actions),
            )
        try:
            if self._root:
                sink = self._sink if self._sink is not None else get_sink()
                render_report(self._closing_title(), actions, sink, get_theme(sink))
            elif actions:
                parent.append(Group(self._closing_title(), tuple(actions)))
        finally:
            slot.replace_actions(parent)
            slot.active = self._saved_active

    def __enter__(self) -> Scope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def open_root(
    message: Message,
    *,
    slot: ContextSlot | None = None,
    sink: ReportSink | None = None,
) -> Scope:
    """Open a root scope; its close renders exactly one report.

    Opening a root while another root is open is allowed: the inner root parks the
    outer buffer and renders its own report when it closes.

    Args:
        message (Message): Report title or a callable producing it.
        slot (ContextSlot | None): Explicit context handle.
        sink (ReportSink | None): Destination; defaults to the configured sink.

    Returns:
        Scope: The open scope.
    """
    return Scope(message, root=True, slot=slot, sink=sink)


def open_nested(message: Message, *, slot: ContextSlot | None = None) -> Scope:
    """Open a nested scope that folds its actions into the enclosing scope.

    Args:
        message (Message): Group title or a callable producing it.
        slot (ContextSlot | None): Explicit context handle.

    Returns:
        Scope: The open scope.
    """
    return Scope(message, root=False, slot=slot)


def evaluate_nested(
    message: Message,
    body: Callable[[], T],
    *,
    slot: ContextSlot | None = None,
) -> T:
    """Evaluate ``body()`` inside a nested scope and return its result."""
    with open_nested(message, slot=slot):
        return body()
