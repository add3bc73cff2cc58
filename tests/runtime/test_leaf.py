# topmark:header:start
#
#   project      : ScopeReport
#   file         : test_leaf.py
#   file_relpath : tests/runtime/test_leaf.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Leaf logging: immediate output when idle, buffering under a root, failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from scopereport.actions.model import Leaf
from scopereport.errors import ReportFailure
from scopereport.rendering.sinks import CollectingSink
from scopereport.runtime import (
    ContextSlot,
    absorb,
    absorb_errors,
    error,
    fail,
    info,
    open_nested,
    open_root,
    warn,
)

if TYPE_CHECKING:
    from collections.abc import Callable


def test_idle_leaves_print_immediately_in_order(sink: CollectingSink) -> None:
    """Without an open root every leaf call writes one line right away."""
    info("one")
    warn("two")
    error("three")

    assert sink.lines == ["info: one", "warning: two", "error: three"]


def test_leaves_under_root_are_buffered(sink: CollectingSink) -> None:
    """Nothing is written until the root closes."""
    with open_root("Task"):
        info("queued")
        assert sink.lines == []
    assert sink.lines == [" Task", " ╰── info: queued"]


def test_explicit_sink_for_idle_leaf(sink: CollectingSink) -> None:
    """An explicit sink receives the immediate line instead of the default one."""
    own = CollectingSink()
    warn("direct", sink=own)

    assert own.lines == ["warning: direct"]
    assert sink.lines == []


def test_fail_records_then_raises() -> None:
    """`fail` appends an error leaf to the open scope before raising."""
    slot = ContextSlot(active=True)
    with pytest.raises(ReportFailure):
        fail("broken", slot=slot)

    assert slot.actions == [Leaf.error("broken")]


def test_fail_when_idle_prints_and_raises(sink: CollectingSink) -> None:
    """Outside a root the failure message is printed at once."""
    with pytest.raises(ReportFailure):
        fail("broken")

    assert sink.lines == ["error: broken"]


def test_report_failure_carries_no_payload() -> None:
    """The failure marker has a fixed, payload-free text form."""
    failure = ReportFailure()

    assert str(failure) == "Error"
    assert repr(failure) == "ReportFailure()"
    assert failure.args == ()


def test_absorb_records_the_foreign_error() -> None:
    """`absorb` records the exception text and returns a fresh failure."""
    slot = ContextSlot(active=True)
    failure = absorb(FileNotFoundError("data.csv not found"), slot=slot)

    assert isinstance(failure, ReportFailure)
    assert slot.actions == [Leaf.error("data.csv not found")]


def test_absorb_passes_report_failure_through() -> None:
    """An existing failure is not recorded a second time."""
    slot = ContextSlot(active=True)
    original = ReportFailure()

    assert absorb(original, slot=slot) is original
    assert slot.actions == []


def test_absorb_errors_as_context_manager(sink: CollectingSink) -> None:
    """Matching exceptions leave the block as `ReportFailure` without a chained cause."""
    with pytest.raises(ReportFailure) as excinfo:
        with open_root("Load"):
            with open_nested("Parsing"):
                with absorb_errors(ValueError):
                    int("abc")

    assert excinfo.value.__suppress_context__
    assert sink.lines == [
        " Load",
        " ╰── Parsing",
        "     ╰── error: invalid literal for int() with base 10: 'abc'",
    ]


def test_absorb_errors_ignores_other_types(sink: CollectingSink) -> None:
    """Exceptions outside the given types propagate untouched."""
    with pytest.raises(KeyError):
        with absorb_errors(ValueError):
            raise KeyError("k")

    assert sink.lines == []


def test_absorb_errors_does_not_rerecord_failures(sink: CollectingSink) -> None:
    """A `ReportFailure` raised inside the block is not recorded again."""
    with pytest.raises(ReportFailure):
        with open_root("Task"):
            with absorb_errors():
                fail("once")

    assert sink.lines == [" Task", " ╰── error: once"]


def test_absorb_errors_as_decorator(sink: CollectingSink) -> None:
    """Used as a decorator, every call converts matching exceptions."""

    @absorb_errors(OSError)
    def read() -> str:
        raise PermissionError("permission denied")

    with pytest.raises(ReportFailure):
        read()
    with pytest.raises(ReportFailure):
        read()

    assert sink.lines == ["error: permission denied", "error: permission denied"]


@pytest.mark.parametrize(
    ("emit", "label"),
    [(info, "info"), (warn, "warning"), (error, "error")],
)
def test_severity_labels(sink: CollectingSink, emit: Callable[[str], None], label: str) -> None:
    """Each leaf function uses its own severity label."""
    emit("message")

    assert sink.lines == [f"{label}: message"]
