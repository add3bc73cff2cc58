# topmark:header:start
#
#   project      : ScopeReport
#   file         : leaf.py
#   file_relpath : src/scopereport/runtime/leaf.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Leaf logging API.

`info`, `warn` and `error` either print one line immediately (no root scope open)
or append a leaf to the innermost open scope. `fail` records an error and raises
`ReportFailure`; `absorb` and `absorb_errors` convert foreign exceptions into a
recorded error plus a `ReportFailure`, so the context is captured once at the
boundary instead of travelling with the exception.
"""

from __future__ import annotations

from contextlib import ContextDecorator
from typing import TYPE_CHECKING, NoReturn

from scopereport.actions.model import Leaf, Severity
from scopereport.config.logging import get_logger
from scopereport.config.state import get_sink, get_theme
from scopereport.errors import ReportFailure
from scopereport.rendering.renderer import format_leaf
from scopereport.runtime.context import current_slot

if TYPE_CHECKING:
    from types import TracebackType

    from scopereport.config.logging import ScopereportLogger
    from scopereport.rendering.sinks import ReportSink
    from scopereport.runtime.context import ContextSlot

logger: ScopereportLogger = get_logger(__name__)


def _emit(
    severity: Severity,
    message: str,
    slot: ContextSlot | None,
    sink: ReportSink | None,
) -> None:
    target_slot = slot if slot is not None else current_slot()
    if target_slot.active:
        target_slot.record(Leaf(severity, message))
        return
    target_sink = sink if sink is not None else get_sink()
    color = get_theme(target_sink).color
    target_sink.write_line(format_leaf(severity, message, color=color))


def info(message: str, *, slot: ContextSlot | None = None, sink: ReportSink | None = None) -> None:
    """Record (or print) an ``info`` message.

    Args:
        message: Already formatted message text.
        slot: Explicit context handle; defaults to the calling thread's slot.
        sink: Destination when printed immediately; defaults to the configured sink.
    """
    _emit(Severity.INFO, message, slot, sink)


def warn(message: str, *, slot: ContextSlot | None = None, sink: ReportSink | None = None) -> None:
    """Record (or print) a ``warning`` message."""
    _emit(Severity.WARNING, message, slot, sink)


def error(message: str, *, slot: ContextSlot | None = None, sink: ReportSink | None = None) -> None:
    """Record (or print) an ``error`` message."""
    _emit(Severity.ERROR, message, slot, sink)


def fail(
    message: str,
    *,
    slot: ContextSlot | None = None,
    sink: ReportSink | None = None,
) -> NoReturn:
    """Record an ``error`` message, then raise `ReportFailure`.

    Raises:
        ReportFailure: Always.
    """
    _emit(Severity.ERROR, message, slot, sink)
    raise ReportFailure()


def absorb(
    exc: BaseException,
    *,
    slot: ContextSlot | None = None,
    sink: ReportSink | None = None,
) -> ReportFailure:
    """Record ``exc`` as an error leaf and return the failure marker replacing it.

    A `ReportFailure` is returned unchanged: its context was recorded when it was
    produced.

    Example:
        ```python
        try:
            handle = path.open()
        except OSError as exc:
            raise absorb(exc) from None
        ```
    """
    if isinstance(exc, ReportFailure):
        return exc
    logger.debug("Absorbing %s into the current report", type(exc).__name__)
    _emit(Severity.ERROR, str(exc), slot, sink)
    return ReportFailure()


class absorb_errors(ContextDecorator):  # noqa: N801 - used like a function
    """Convert exceptions leaving a block (or function) into `ReportFailure`.

    Works as a context manager and as a decorator. Exceptions that are not instances
    of ``types`` pass through untouched.

    Args:
        *types (type[BaseException]): Exception types to convert; defaults to
            `Exception`.
        slot (ContextSlot | None): Explicit context handle.
        sink (ReportSink | None): Destination when no root scope is open.
    """

    def __init__(
        self,
        *types: type[BaseException],
        slot: ContextSlot | None = None,
        sink: ReportSink | None = None,
    ) -> None:
        self.types: tuple[type[BaseException], ...] = types or (Exception,)
        self.slot = slot
        self.sink = sink

    def __enter__(self) -> absorb_errors:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None or isinstance(exc, ReportFailure) or not isinstance(exc, self.types):
            return False
        raise absorb(exc, slot=self.slot, sink=self.sink) from None
