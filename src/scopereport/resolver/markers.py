# topmark:header:start
#
#   project      : ScopeReport
#   file         : markers.py
#   file_relpath : src/scopereport/resolver/markers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Recognising annotation markers in syntax trees.

A marker call such as ``group("Reading {path}")`` is only meaningful to the
resolver, so it has to be told apart from any other call. Two resolvers are
provided:

- `RuntimeMarkers` resolves the callee against the namespace of a live function
  (closure cells, globals, builtins), following attribute chains, and compares the
  result by identity;
- `StaticMarkers` works on an unimported module: it tracks ``scopereport`` imports
  (``from scopereport import group as g``, ``import scopereport as sr``) and
  resolves the callee to a dotted name.
"""

from __future__ import annotations

import ast
import builtins
import inspect
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol, TypeVar

from scopereport.errors import AnnotationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import FunctionType

T = TypeVar("T")

MARKER_ATTRIBUTE = "__scopereport_marker__"

_PACKAGE = "scopereport"


class MarkerKind(str, Enum):
    """The annotation a marker stands for."""

    REPORT = "report"
    LOG = "log"
    GROUP = "group"


# Public import paths of every marker
_MARKER_MODULES: dict[MarkerKind, tuple[str, ...]] = {
    MarkerKind.GROUP: ("scopereport", "scopereport.resolver", "scopereport.resolver.markers"),
    MarkerKind.REPORT: ("scopereport", "scopereport.resolver", "scopereport.resolver.decorators"),
    MarkerKind.LOG: ("scopereport", "scopereport.resolver", "scopereport.resolver.decorators"),
}
MARKER_PATHS: dict[str, MarkerKind] = {
    f"{module}.{kind.value}": kind
    for kind, modules in _MARKER_MODULES.items()
    for module in modules
}


def tag_marker(kind: MarkerKind) -> Callable[[T], T]:
    """Mark a public annotation object so `RuntimeMarkers` can recognise it."""

    def decorator(obj: T) -> T:
        setattr(obj, MARKER_ATTRIBUTE, kind)
        return obj

    return decorator


def marker_kind(obj: object) -> MarkerKind | None:
    """Return the marker kind of a live object, or None."""
    kind = inspect.getattr_static(obj, MARKER_ATTRIBUTE, None)
    return kind if isinstance(kind, MarkerKind) else None


@tag_marker(MarkerKind.GROUP)
def group(template: str, *args: Any) -> Callable[[T], T]:
    """Annotate the next statement, or one expression, with a titled nested scope.

    Statement form, placed on its own line directly before the annotated statement::

        group("Reading {path}")
        rows = read_rows(path)

    Expression form, wrapping exactly one operand::

        total = group("Summing {} rows", len(rows))(sum(rows))

    Markers are consumed by ``@report`` when the function is decorated; the call
    itself never runs in a resolved function.

    Raises:
        AnnotationError: Always, when executed: the enclosing function was not
            decorated with ``@report``.
    """
    raise AnnotationError(
        f"group({template!r}) executed at run time: decorate the enclosing function "
        "with @report"
    )


class MarkerResolver(Protocol):
    """Maps a callee expression to the marker it denotes."""

    def kind_of(self, node: ast.expr) -> MarkerKind | None:
        """Return the marker kind ``node`` refers to, or None."""
        ...


_MISSING = object()


class RuntimeMarkers:
    """Resolve callees against a live function's namespace.

    Args:
        func (FunctionType): The function whose body is being rewritten.
    """

    def __init__(self, func: FunctionType) -> None:
        self._cells: dict[str, Any] = {}
        for name, cell in zip(func.__code__.co_freevars, func.__closure__ or ()):
            try:
                self._cells[name] = cell.cell_contents
            except ValueError:  # empty cell
                continue
        self._globals: Mapping[str, Any] = func.__globals__
        namespace: Any = getattr(func, "__builtins__", builtins)
        self._builtins: Mapping[str, Any] = (
            namespace if isinstance(namespace, dict) else vars(namespace)
        )

    def _lookup(self, name: str) -> object:
        for namespace in (self._cells, self._globals, self._builtins):
            if name in namespace:
                return namespace[name]
        return _MISSING

    def resolve(self, node: ast.expr) -> object:
        """Return the object ``node`` denotes, or a private sentinel if unknown."""
        if isinstance(node, ast.Name):
            return self._lookup(node.id)
        if isinstance(node, ast.Attribute):
            base = self.resolve(node.value)
            if base is _MISSING:
                return _MISSING
            try:
                return inspect.getattr_static(base, node.attr)
            except AttributeError:
                return _MISSING
        return _MISSING

    def kind_of(self, node: ast.expr) -> MarkerKind | None:
        obj = self.resolve(node)
        if obj is _MISSING:
            return None
        return marker_kind(obj)


class StaticMarkers:
    """Resolve callees of an unimported module through its ``scopereport`` imports.

    Args:
        imports (Mapping[str, str]): Local name to fully qualified dotted name, as
            built by `StaticMarkers.from_module`.
    """

    def __init__(self, imports: Mapping[str, str]) -> None:
        self.imports: dict[str, str] = dict(imports)

    @classmethod
    def from_module(cls, tree: ast.Module) -> StaticMarkers:
        """Collect every ``scopereport`` import found anywhere in ``tree``."""
        imports: dict[str, str] = {}
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if not _in_package(alias.name):
                        continue
                    if alias.asname:
                        imports[alias.asname] = alias.name
                    else:
                        imports[_PACKAGE] = _PACKAGE
            elif isinstance(node, ast.ImportFrom):
                if node.level or node.module is None or not _in_package(node.module):
                    continue
                for alias in node.names:
                    imports[alias.asname or alias.name] = f"{node.module}.{alias.name}"
        return cls(imports)

    def qualified_name(self, node: ast.expr) -> str | None:
        """Return the dotted name ``node`` denotes, or None."""
        if isinstance(node, ast.Name):
            return self.imports.get(node.id)
        if isinstance(node, ast.Attribute):
            base = self.qualified_name(node.value)
            return None if base is None else f"{base}.{node.attr}"
        return None

    def kind_of(self, node: ast.expr) -> MarkerKind | None:
        name = self.qualified_name(node)
        return None if name is None else MARKER_PATHS.get(name)


def _in_package(module: str) -> bool:
    return module == _PACKAGE or module.startswith(f"{_PACKAGE}.")
