# topmark:header:start
#
#   project      : ScopeReport
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the ScopeReport test suite.

Every test starts from a fresh recording slot on the calling thread, the built-in
configuration and a `CollectingSink` installed as the default sink, so reports
and immediately printed leaves can be asserted line by line through the `sink`
fixture.

Notes:
    The CLI configures the ``scopereport`` logger with its own stderr handler and
    disables propagation. The autouse fixture undoes that after each test so
    ``caplog`` keeps seeing library log records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, cast

import pytest

from scopereport.config import state
from scopereport.config.model import ReportConfig
from scopereport.rendering.color import ColorMode
from scopereport.rendering.sinks import CollectingSink
from scopereport.runtime.context import reset_current_slot

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]

_ENV_VARS = (
    "SCOPEREPORT_LOG_LEVEL",
    "SCOPEREPORT_FRAME",
    "SCOPEREPORT_GLYPHS",
    "SCOPEREPORT_COLOR",
    "FORCE_COLOR",
    "NO_COLOR",
)


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_resolver: DecoratorType[Any] = as_typed_mark(pytest.mark.resolver)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def fixture(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.fixture`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.fixture`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.fixture`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.fixture(*args, **kwargs))


@pytest.fixture(autouse=True)
def isolated_report_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset recording state, configuration, environment and logging around each test.

    Args:
        monkeypatch (pytest.MonkeyPatch): Used to clear ``SCOPEREPORT_*`` and color
            environment variables for the duration of the test.

    Yields:
        None: Control to the test.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_current_slot()
    state.reset()
    yield
    reset_current_slot()
    state.reset()
    package_logger = logging.getLogger("scopereport")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def sink() -> CollectingSink:
    """Install an unbordered `CollectingSink` with color disabled as the default sink.

    Returns:
        CollectingSink: The installed sink.
    """
    collecting = CollectingSink()
    state.configure(ReportConfig(color=ColorMode.NEVER), sink=collecting)
    return collecting


@pytest.fixture
def framed_sink() -> CollectingSink:
    """Install a `CollectingSink` reporting a 30-column frame width.

    Returns:
        CollectingSink: The installed sink.
    """
    collecting = CollectingSink(width=30)
    state.configure(ReportConfig(color=ColorMode.NEVER), sink=collecting)
    return collecting


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an isolated temporary project directory.

    Keeps configuration discovery from finding the repository's own
    ``pyproject.toml``.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd
