# topmark:header:start
#
#   project      : ScopeReport
#   file         : test_log.py
#   file_relpath : tests/resolver/test_log.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""``@log`` used on its own: a root scope around every call."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING

import pytest

from scopereport import info, log, warn
from scopereport.errors import ReportFailure
from scopereport.resolver.decorators import ROOT_ATTRIBUTE, RootSpec
from scopereport.runtime import absorb_errors, current_slot, open_nested

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from scopereport.rendering.sinks import CollectingSink

pytestmark = pytest.mark.resolver

TARGET = "warehouse"


@log("Sync {} to {target}", "users")
def sync(target: str, *, dry_run: bool = False) -> str:
    """Sync users."""
    if dry_run:
        warn("dry run")
    info("synced")
    return target


@log
def untitled() -> None:
    info("x")


@log("Loading into {TARGET}")
def load_globally() -> None:
    with open_nested("Step"):
        info("loaded")


@log("Reading {path}")
@absorb_errors(OSError)
def read(path: str) -> str:
    raise FileNotFoundError(f"{path} does not exist")


@log("Counting to {n}")
def count(n: int) -> Iterator[int]:
    for number in range(n):
        info(str(number))
        yield number


@log("Fetching {name}")
async def fetch(name: str) -> str:
    await asyncio.sleep(0)
    info("fetched")
    return name


@log("Streaming")
async def astream() -> AsyncIterator[int]:
    info("start")
    yield 1


def test_positional_and_named_fields(sink: CollectingSink) -> None:
    """Positional fields come from ``@log``; named fields from the call's arguments."""
    assert sync("db", dry_run=True) == "db"

    assert sink.lines == [" Sync users to db", " ├── warning: dry run", " ╰── info: synced"]


def test_defaults_are_applied_before_formatting(sink: CollectingSink) -> None:
    """Arguments left at their default are available to the title."""

    @log("Mode {dry_run}")
    def run(*, dry_run: bool = False) -> None:
        info("ran")

    run()
    assert sink.lines[0] == " Mode False"


def test_bare_log_has_an_empty_title(sink: CollectingSink) -> None:
    """``@log`` without a template renders an untitled report."""
    untitled()

    assert sink.lines == [" ", " ╰── info: x"]


def test_globals_are_available_to_the_title(sink: CollectingSink) -> None:
    """Names that are not parameters resolve against the module globals."""
    load_globally()

    assert sink.lines == [" Loading into warehouse", " ╰── Step", "     ╰── info: loaded"]


def test_title_comprehension_sees_parameters(sink: CollectingSink) -> None:
    """A comprehension in the title can read every parameter of the call."""

    @log("Tags {' '.join(mark + tag for tag in tags)}")
    def tag(tags: list[str], mark: str = "#") -> None:
        info("tagged")

    tag(["a", "b"])
    assert sink.lines == [" Tags #a #b", " ╰── info: tagged"]


def test_metadata_and_root_spec(sink: CollectingSink) -> None:
    """The wrapper keeps the function's metadata and records its root spec."""
    assert sync.__name__ == "sync"
    assert sync.__doc__ == "Sync users."
    assert getattr(sync, ROOT_ATTRIBUTE) == RootSpec("Sync {} to {target}", ("users",))
    assert list(inspect.signature(sync).parameters) == ["target", "dry_run"]


def test_absorbed_error_is_rendered_then_raised(sink: CollectingSink) -> None:
    """A foreign error converted inside the root is part of the report."""
    with pytest.raises(ReportFailure):
        read("missing.txt")

    assert sink.lines == [" Reading missing.txt", " ╰── error: missing.txt does not exist"]
    assert not current_slot().active


def test_generator_wrapper(sink: CollectingSink) -> None:
    """A generator keeps its root open until it is exhausted."""
    numbers = count(2)
    assert inspect.isgeneratorfunction(count)
    assert sink.lines == []

    assert list(numbers) == [0, 1]
    assert sink.lines == [" Counting to 2", " ├── info: 0", " ╰── info: 1"]


def test_async_wrapper(sink: CollectingSink) -> None:
    """Coroutines are awaited inside the root scope."""
    assert inspect.iscoroutinefunction(fetch)
    assert asyncio.run(fetch("users")) == "users"

    assert sink.lines == [" Fetching users", " ╰── info: fetched"]


def test_async_generator_wrapper(sink: CollectingSink) -> None:
    """Async generators are wrapped as async generators."""
    assert inspect.isasyncgenfunction(astream)

    async def collect() -> list[int]:
        return [number async for number in astream()]

    assert asyncio.run(collect()) == [1]
    assert sink.lines == [" Streaming", " ╰── info: start"]


def test_positional_values_are_bound_once() -> None:
    """The ``@log`` positional values are captured at decoration time."""
    values = ["first"]

    @log("{}", values[0])
    def run() -> None:
        pass

    values[0] = "second"
    assert getattr(run, ROOT_ATTRIBUTE).args == ("first",)
