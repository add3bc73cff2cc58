# topmark:header:start
#
#   project      : ScopeReport
#   file         : test_report.py
#   file_relpath : tests/resolver/test_report.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resolved ``@report`` functions: markers become scopes with the right shape."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING

import pytest

import scopereport as sr
from scopereport import error, fail, group, info, log, report, warn
from scopereport import group as section
from scopereport.errors import AnnotationError, ReportFailure

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from scopereport.rendering.sinks import CollectingSink

pytestmark = pytest.mark.resolver


# Functions under test


@report
@log("Task")
def task() -> None:
    group("Step A")
    info("did A")

    group("Step B")
    pass


@report
@log("Main")
def main_validate() -> None:
    group("Validate")
    if True:
        error("bad input")
        info("checked")


@report
@log("Task")
def stacked() -> None:
    group("Outer")
    group("Inner")
    info("leaf")


@report
@log("Importing {path}")
def import_rows(path: str, rows: list[int]) -> int:
    """Import ``rows`` from ``path``."""
    accepted = 0
    for row in rows:
        group("Row {row}")
        if row < 0:
            warn(f"skipping negative row {row}")
            continue
        accepted += 1
    return accepted


@report
@log("Items")
def numbered(items: list[str]) -> None:
    for index, item in enumerate(items):
        group("Item {} of {}: {item!r}", index + 1, len(items))
        info("seen")


def check_value(value: int) -> int:
    if value > 9:
        warn(f"{value} is large")
    return value * 2


@report
@log("Doubling")
def doubled(values: list[int]) -> list[int]:
    return [group("Value {}", value)(check_value(value)) for value in values]


@report
@log("Find {target}")
def find(items: list[int], target: int) -> int:
    for index, item in enumerate(items):
        group("Compare {item}")
        if item == target:
            info("match")
            return index
    return -1


@report
@log("Parse")
def parse_all(texts: list[str]) -> list[int]:
    results: list[int] = []
    for text in texts:
        group("Parsing {text!r}")
        try:
            results.append(int(text))
        except ValueError:
            warn("not a number")
            continue
        else:
            info("ok")
        finally:
            group("Cleanup")
            if not results:
                info("nothing parsed yet")
    return results


@report
@log("Countdown")
def countdown(start: int) -> None:
    current = start
    while True:
        group("Tick {current}")
        if current == 0:
            info("liftoff")
            break
        current -= 1


@report
@log("Shapes")
def describe_shapes(shapes: list[object]) -> None:
    for shape in shapes:
        match shape:
            case (x, y):
                group("Point")
                info(f"{x},{y}")
            case str() as name:
                group("Named {name}")
                warn("unknown shape")
            case _:
                pass


@report
@log("Load")
def load(path: str) -> None:
    group("Opening {path}")
    if path.endswith(".bin"):
        fail("binary files are not supported")
    info("opened")


@report
def sub_steps() -> None:
    group("Sub-step")
    info("inside")


@report
@log("Outer")
def outer_calls_inner() -> None:
    group("Calling")
    sub_steps()


@report
@log("Aliases")
def aliased() -> None:
    section("Via alias")
    info("a")
    sr.group("Via module")
    info("b")


@report
@log("Recursion {n}")
def recurse(n: int) -> None:
    group("Level {n}")
    if n > 0:
        info(f"descending from {n}")
    if n > 0:
        recurse(n - 1)


calls: list[str] = []


def expensive(label: str) -> str:
    calls.append(label)
    return label


@report
@log("Lazy")
def lazy() -> None:
    group("{expensive('empty')}")
    pass
    group("{expensive('kept')}")
    info("x")


@report
@log("Defaults")
def with_defaults(count: int = 3, *, label: str = "n") -> str:
    """Repeat ``label``."""
    group("Repeat")
    info(label * count)
    return label * count


@report
@log("Fetching {name}")
async def fetch(name: str) -> str:
    group("Waiting")
    value = await lookup(name)
    return value


async def lookup(name: str) -> str:
    await asyncio.sleep(0)
    info(f"found {name}")
    return name.upper()


@report
@log("Stream")
def stream(count: int) -> Iterator[int]:
    for number in range(count):
        group("Item {number}")
        if number % 2 == 0:
            info(f"even {number}")
        yield number


@report
@log("Async stream")
async def astream(count: int) -> AsyncIterator[int]:
    for number in range(count):
        group("Item {number}")
        await asyncio.sleep(0)
        yield number


class Base:
    def describe(self) -> str:
        return "base"


class Child(Base):
    def __init__(self, name: str) -> None:
        self.name = name
        self.__secret = "s3cr3t"

    @report
    @log("Describing {self.name}")
    def describe(self) -> str:
        result = super().describe()
        group("Secret {self.__secret}")
        info(result)
        return result

    @report
    @log("Copying")
    def copy(self) -> Child:
        clone = Child(self.name)
        group("Creating")
        info(type(clone).__name__)
        return clone

    @staticmethod
    @report
    @log("Static")
    def static_helper() -> None:
        group("Inside")
        info("static")


class Explicit(Base):
    @report
    @log("Explicit")
    def describe(self) -> str:
        return group("Super")(super(Explicit, self).describe())


@report
@log("Load {count} rows")
def load_rows() -> None:
    group("Read")
    error("file missing")
    fail("cannot continue")
    count = 3
    info(f"{count} rows")


def make_greeter(prefix: str):
    @report
    @log("Greeting")
    def greet(name: str) -> str:
        group("{prefix} {name}")
        info(prefix)
        return f"{prefix} {name}"

    return greet


def make_nested_user():
    @report
    @log("Outer")
    def outer(values: list[int]) -> None:
        @report
        def helper(value: int) -> None:
            group("Value {value}")
            info(str(value))

        for value in values:
            helper(value)

    return outer


# Tests


def test_empty_group_is_absent(sink: CollectingSink) -> None:
    """Only the group that recorded something appears."""
    task()

    assert sink.lines == [" Task", " ╰── Step A", "     ╰── info: did A"]


def test_recording_order_within_group(sink: CollectingSink) -> None:
    """Leaves keep their order under the group."""
    main_validate()

    assert sink.lines == [
        " Main",
        " ╰── Validate",
        "     ├── error: bad input",
        "     ╰── info: checked",
    ]


def test_stacked_markers_nest_outer_to_inner(sink: CollectingSink) -> None:
    """Consecutive markers on one statement nest in declaration order."""
    stacked()

    assert sink.lines == [
        " Task",
        " ╰── Outer",
        "     ╰── Inner",
        "         ╰── info: leaf",
    ]


def test_titles_use_locals_and_parameters(sink: CollectingSink) -> None:
    """Root and group titles are formatted from the function's scope."""
    assert import_rows("data.csv", [1, -2, 3]) == 2

    assert sink.lines == [
        " Importing data.csv",
        " ╰── Row -2",
        "     ╰── warning: skipping negative row -2",
    ]


def test_positional_marker_arguments(sink: CollectingSink) -> None:
    """Positional marker arguments fill ``{}`` fields."""
    numbered(["a", "b"])

    assert sink.lines == [
        " Items",
        " ├── Item 1 of 2: 'a'",
        " │   ╰── info: seen",
        " ╰── Item 2 of 2: 'b'",
        "     ╰── info: seen",
    ]


def test_expression_markers_return_their_value(sink: CollectingSink) -> None:
    """``group(...)(expr)`` evaluates ``expr`` inside a group and yields its value."""
    assert doubled([3, 12]) == [6, 24]

    assert sink.lines == [
        " Doubling",
        " ╰── Value 12",
        "     ╰── warning: 12 is large",
    ]


def test_early_return_closes_the_group(sink: CollectingSink) -> None:
    """Returning from inside an annotated statement still records the group."""
    assert find([4, 5, 6], 5) == 1

    assert sink.lines == [" Find 5", " ╰── Compare 5", "     ╰── info: match"]


def test_try_statement_and_handlers(sink: CollectingSink) -> None:
    """Markers work on ``try`` statements and inside their clauses."""
    assert parse_all(["x", "1"]) == [1]

    assert sink.lines == [
        " Parse",
        " ├── Parsing 'x'",
        " │   ├── warning: not a number",
        " │   ╰── Cleanup",
        " │       ╰── info: nothing parsed yet",
        " ╰── Parsing '1'",
        "     ╰── info: ok",
    ]


def test_while_loop_with_break(sink: CollectingSink) -> None:
    """``break`` inside an annotated statement leaves the loop and closes the group."""
    countdown(2)

    assert sink.lines == [" Countdown", " ╰── Tick 0", "     ╰── info: liftoff"]


def test_match_cases(sink: CollectingSink) -> None:
    """Markers inside ``match`` cases are resolved."""
    describe_shapes([(1, 2), "blob", 3.5])

    assert sink.lines == [
        " Shapes",
        " ├── Point",
        " │   ╰── info: 1,2",
        " ╰── Named blob",
        "     ╰── warning: unknown shape",
    ]


def test_failure_is_recorded_and_propagates(sink: CollectingSink) -> None:
    """`fail` inside a group records the error, renders the report and raises."""
    with pytest.raises(ReportFailure):
        load("image.bin")

    assert sink.lines == [
        " Load",
        " ╰── Opening image.bin",
        "     ╰── error: binary files are not supported",
    ]


def test_report_without_log_folds_into_caller(sink: CollectingSink) -> None:
    """A function without ``@log`` records into the caller's open scope."""
    outer_calls_inner()

    assert sink.lines == [
        " Outer",
        " ╰── Calling",
        "     ╰── Sub-step",
        "         ╰── info: inside",
    ]


def test_report_without_log_and_without_root_prints(sink: CollectingSink) -> None:
    """Called with no open root, leaves of a group print immediately."""
    sub_steps()

    assert sink.lines == ["info: inside"]


def test_marker_aliases(sink: CollectingSink) -> None:
    """Markers are recognised through import aliases and module attributes."""
    aliased()

    assert sink.lines == [
        " Aliases",
        " ├── Via alias",
        " │   ╰── info: a",
        " ╰── Via module",
        "     ╰── info: b",
    ]


def test_recursive_function_renders_one_report_per_call(sink: CollectingSink) -> None:
    """A recursive call refers to the resolved function and opens its own root."""
    recurse(1)

    assert sink.lines == [
        " Recursion 0",
        " Recursion 1",
        " ╰── Level 1",
        "     ╰── info: descending from 1",
    ]


def test_titles_of_empty_groups_are_never_formatted(sink: CollectingSink) -> None:
    """The title of a dropped group is not evaluated."""
    calls.clear()
    lazy()

    assert calls == ["kept"]
    assert sink.lines == [" Lazy", " ╰── kept", "     ╰── info: x"]


def test_signature_and_metadata_are_preserved(sink: CollectingSink) -> None:
    """Defaults, docstring, names and annotations survive resolution."""
    assert with_defaults() == "nnn"
    assert with_defaults(2, label="ab") == "abab"
    assert with_defaults.__name__ == "with_defaults"
    assert with_defaults.__qualname__ == "with_defaults"
    assert with_defaults.__doc__ == "Repeat ``label``."
    assert with_defaults.__defaults__ == (3,)
    assert with_defaults.__kwdefaults__ == {"label": "n"}
    assert with_defaults.__annotations__ == {"count": "int", "label": "str", "return": "str"}
    assert list(inspect.signature(with_defaults).parameters) == ["count", "label"]
    assert not hasattr(with_defaults, "__wrapped__")


def test_async_function(sink: CollectingSink) -> None:
    """Coroutines keep their scopes open across ``await``."""
    assert inspect.iscoroutinefunction(fetch)
    assert asyncio.run(fetch("users")) == "USERS"

    assert sink.lines == [
        " Fetching users",
        " ╰── Waiting",
        "     ╰── info: found users",
    ]


def test_generator_function(sink: CollectingSink) -> None:
    """Generators render their report once exhausted."""
    numbers = stream(3)
    assert inspect.isgenerator(numbers)
    assert sink.lines == []

    assert list(numbers) == [0, 1, 2]
    assert sink.lines == [
        " Stream",
        " ├── Item 0",
        " │   ╰── info: even 0",
        " ╰── Item 2",
        "     ╰── info: even 2",
    ]


def test_async_generator_function(sink: CollectingSink) -> None:
    """Async generators are resolved like any other function."""

    async def collect() -> list[int]:
        return [number async for number in astream(2)]

    assert asyncio.run(collect()) == [0, 1]
    assert sink.lines == [" Async stream"]


def test_method_with_super_and_private_name(sink: CollectingSink) -> None:
    """Methods keep ``super()`` and name mangling of private attributes."""
    assert Child("kid").describe() == "base"

    assert sink.lines == [
        " Describing kid",
        " ╰── Secret s3cr3t",
        "     ╰── info: base",
    ]


def test_super_without_arguments_in_expression_is_rejected() -> None:
    """An argument-less ``super()`` cannot be moved into a lifted expression."""
    with pytest.raises(AnnotationError, match=r"operand cannot use super\(\) without arguments"):

        class Broken(Base):
            @report
            def describe(self) -> str:
                return group("Super")(super().describe())


def test_super_with_arguments_in_expression(sink: CollectingSink) -> None:
    """An explicit ``super(Class, self)`` works inside an expression marker."""
    assert Explicit().describe() == "base"

    assert sink.lines == [" Explicit"]


def test_failing_root_title_still_reports(sink: CollectingSink) -> None:
    """A title reading a variable the body never assigned is replaced, not lost."""
    with pytest.raises(ReportFailure):
        load_rows()

    assert sink.lines == [
        " <title failed: NameError>",
        " ├── Read",
        " │   ╰── error: file missing",
        " ╰── error: cannot continue",
    ]


def test_method_referring_to_its_class(sink: CollectingSink) -> None:
    """A method can refer to its own class by name."""
    clone = Child("kid").copy()

    assert isinstance(clone, Child)
    assert sink.lines == [" Copying", " ╰── Creating", "     ╰── info: Child"]


def test_static_method(sink: CollectingSink) -> None:
    """``@staticmethod`` can wrap a resolved function."""
    Child.static_helper()

    assert sink.lines == [" Static", " ╰── Inside", "     ╰── info: static"]


def test_closure_variables(sink: CollectingSink) -> None:
    """Free variables of nested functions keep referring to the enclosing cells."""
    hello = make_greeter("Hello")
    assert hello("Ada") == "Hello Ada"

    assert sink.lines == [" Greeting", " ╰── Hello Ada", "     ╰── info: Hello"]


def test_nested_report_functions(sink: CollectingSink) -> None:
    """A resolved function defined inside another one records into its caller's root."""
    make_nested_user()([1, 2])

    assert sink.lines == [
        " Outer",
        " ├── Value 1",
        " │   ╰── info: 1",
        " ╰── Value 2",
        "     ╰── info: 2",
    ]


def test_group_outside_report_raises_when_run() -> None:
    """An unresolved marker fails loudly when executed."""

    def unresolved() -> None:
        group("Never resolved")

    with pytest.raises(sr.AnnotationError, match="decorate the enclosing function with @report"):
        unresolved()
