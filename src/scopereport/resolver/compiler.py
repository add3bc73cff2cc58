# topmark:header:start
#
#   project      : ScopeReport
#   file         : compiler.py
#   file_relpath : src/scopereport/resolver/compiler.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Recompiling a function with its markers rewritten.

`rewrite_function` retrieves the source of a live function, rewrites its markers
with `MarkerTransformer`, optionally wraps the body in a root scope, compiles the
result and rebuilds a function object that shares the original's globals, closure
cells, defaults and metadata.

The definition is compiled nested inside a factory function whose parameters are
the runtime module, the root arguments and the original free variables, so the
compiler emits free-variable references for all of them. The factory never runs:
the rewritten code object is taken from its constants and paired with the
original cells. Methods are additionally nested in a class of the same name, so
private names are mangled as in the original. The factory declares the name its
definition binds global, so self-references keep resolving to module globals.

`compile_title_function` builds the title function of a standalone ``@log`` the same
way: a real function compiled once, called with the bound arguments.
"""

from __future__ import annotations

import __future__
import ast
import copy
import functools
import inspect
import types
from typing import TYPE_CHECKING, Any, Callable

import scopereport.runtime as runtime_module
from scopereport.config.logging import TRACE_LEVEL, get_logger
from scopereport.constants import ROOT_ARGS_NAME, RUNTIME_NAME
from scopereport.errors import AnnotationDiagnostic, AnnotationError
from scopereport.resolver.markers import RuntimeMarkers
from scopereport.resolver.templates import TemplateError, compile_template
from scopereport.resolver.transformer import MarkerTransformer, wrap_in_root

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scopereport.config.logging import ScopereportLogger
    from scopereport.resolver.decorators import RootSpec
    from scopereport.resolver.transformer import FunctionNode

logger: ScopereportLogger = get_logger(__name__)

_FACTORY_NAME = "__scopereport_factory__"

_TITLE_NAME = "__scopereport_title__"

_COPIED_ATTRIBUTES = ("__kwdefaults__", "__doc__", "__qualname__", "__module__")


def root_placeholders(count: int) -> list[ast.expr]:
    """Return expressions reading the root's positional arguments."""
    return [
        ast.Subscript(
            value=ast.Name(id=ROOT_ARGS_NAME, ctx=ast.Load()),
            slice=ast.Constant(value=index),
            ctx=ast.Load(),
        )
        for index in range(count)
    ]


def future_flags(code: types.CodeType) -> int:
    """Return the ``__future__`` compiler flags ``code`` was compiled with."""
    flags = 0
    for name in __future__.all_feature_names:
        feature = getattr(__future__, name)
        if code.co_flags & feature.compiler_flag:
            flags |= feature.compiler_flag
    return flags


def owner_class_name(func: Callable[..., Any]) -> str | None:
    """Return the name of the class ``func`` was defined in, if any."""
    parts = func.__qualname__.split(".")
    if len(parts) < 2 or parts[-2] == "<locals>":
        return None
    return parts[-2]


@functools.lru_cache(maxsize=32)
def _parse_module(source: str, filename: str) -> ast.Module:
    return ast.parse(source, filename=filename)


def _start_line(node: FunctionNode) -> int:
    return min([node.lineno, *(decorator.lineno for decorator in node.decorator_list)])


def parse_function(func: types.FunctionType) -> FunctionNode:
    """Return a private copy of the definition of ``func``, parsed from its file.

    The whole file is parsed, so line and column numbers match the real source.

    Raises:
        AnnotationError: If the source cannot be retrieved or parsed.
    """
    code = func.__code__
    try:
        lines, _ = inspect.findsource(func)
    except (OSError, TypeError) as exc:
        raise AnnotationError(
            f"@report cannot retrieve the source of {func.__qualname__}: {exc}"
        ) from exc
    try:
        tree = _parse_module("".join(lines), code.co_filename)
    except SyntaxError as exc:
        raise AnnotationError(
            f"@report cannot parse the source of {func.__qualname__}: {exc.msg}"
        ) from exc

    for node in ast.walk(tree):
        if (
            isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
            and node.name == func.__name__
            and _start_line(node) == code.co_firstlineno
        ):
            return copy.deepcopy(node)
    raise AnnotationError(
        f"@report can only decorate a def statement; no definition of {func.__qualname__} "
        f"starts at {code.co_filename}:{code.co_firstlineno}"
    )


def _find_code(code: types.CodeType, name: str) -> types.CodeType | None:
    for const in code.co_consts:
        if isinstance(const, types.CodeType):
            if const.co_name == name and const.co_flags & inspect.CO_OPTIMIZED:
                return const
            found = _find_code(const, name)
            if found is not None:
                return found
    return None


def _factory_module(
    definition: FunctionNode,
    freevars: tuple[str, ...],
    class_name: str | None,
) -> ast.Module:
    params = [RUNTIME_NAME, ROOT_ARGS_NAME, *freevars]
    body: list[ast.stmt] = [definition]
    if class_name is not None:
        body = [
            ast.ClassDef(
                name=class_name,
                bases=[],
                keywords=[],
                body=body,
                decorator_list=[],
            )
        ]
    body.append(ast.Return(value=ast.Constant(value=None)))
    # The def (or class) statement binds its name in the factory; references to it
    # from the body must keep resolving to the module global.
    bound_name = definition.name if class_name is None else class_name
    if bound_name not in params:
        body.insert(0, ast.Global(names=[bound_name]))
    factory = ast.FunctionDef(
        name=_FACTORY_NAME,
        args=ast.arguments(
            posonlyargs=[],
            args=[ast.arg(arg=param) for param in params],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
        decorator_list=[],
        returns=None,
    )
    if hasattr(ast, "TypeVar"):  # Python 3.12+
        factory.type_params = []
        for stmt in body:
            if isinstance(stmt, ast.ClassDef):
                stmt.type_params = []
    module = ast.Module(body=[factory], type_ignores=[])
    ast.copy_location(factory, definition)
    return ast.fix_missing_locations(module)


def rewrite_function(
    func: types.FunctionType,
    *,
    root: RootSpec | None = None,
) -> types.FunctionType:
    """Return a copy of ``func`` with its markers rewritten.

    Args:
        func (types.FunctionType): Plain function to rewrite.
        root (RootSpec | None): Root scope to wrap the whole body in (from ``@log``).

    Returns:
        types.FunctionType: The rewritten function.

    Raises:
        AnnotationError: If the source is unavailable or any marker is malformed.
    """
    if not isinstance(func, types.FunctionType):
        raise AnnotationError(
            f"@report must decorate a function directly (or sit directly above @log), "
            f"got {type(func).__name__}"
        )

    filename = func.__code__.co_filename
    definition = parse_function(func)
    definition.decorator_list = []

    transformer = MarkerTransformer(RuntimeMarkers(func), filename=filename)
    transformer.transform_function(definition)
    diagnostics: list[AnnotationDiagnostic] = list(transformer.diagnostics)

    root_args: tuple[object, ...] = ()
    if root is not None:
        root_args = root.args
        message: ast.expr = ast.Constant(value="")
        if root.template is not None:
            try:
                message = compile_template(
                    root.template, root_placeholders(len(root.args)), anchor=definition
                )
            except TemplateError as exc:
                diagnostics.append(
                    AnnotationDiagnostic(
                        filename, definition.lineno, definition.col_offset, f"@log: {exc}"
                    )
                )
        wrap_in_root(definition, message)

    if diagnostics:
        diagnostics.sort(key=lambda d: (d.lineno, d.col_offset))
        raise AnnotationError(diagnostics)

    original = func.__code__
    module = _factory_module(definition, original.co_freevars, owner_class_name(func))
    if logger.isEnabledFor(TRACE_LEVEL):
        logger.trace("Rewritten source of %s:\n%s", func.__qualname__, ast.unparse(definition))
    factory_code = compile(
        module, filename, "exec", flags=future_flags(original), dont_inherit=True
    )
    code = _find_code(factory_code, func.__name__)
    if code is None:  # pragma: no cover - the definition is always compiled
        raise AnnotationError(f"@report lost the code of {func.__qualname__}")

    cells: dict[str, types.CellType] = dict(zip(original.co_freevars, func.__closure__ or ()))
    cells[RUNTIME_NAME] = types.CellType(runtime_module)
    cells[ROOT_ARGS_NAME] = types.CellType(root_args)
    try:
        closure = tuple(cells[name] for name in code.co_freevars)
    except KeyError as exc:
        raise AnnotationError(
            f"@report cannot rebuild {func.__qualname__}: unknown free variable {exc}"
        ) from exc

    rewritten = types.FunctionType(
        code,
        func.__globals__,
        func.__name__,
        func.__defaults__,
        closure or None,
    )
    for attribute in _COPIED_ATTRIBUTES:
        setattr(rewritten, attribute, getattr(func, attribute))
    annotate = getattr(func, "__annotate__", None)
    if annotate is not None:  # Python 3.14+ deferred annotations
        rewritten.__annotate__ = annotate
    else:
        rewritten.__annotations__ = dict(func.__annotations__)
    if hasattr(func, "__type_params__"):
        rewritten.__type_params__ = func.__type_params__
    rewritten.__dict__.update(func.__dict__)
    logger.debug(
        "Resolved %s (%d marker(s)%s)",
        func.__qualname__,
        transformer.rewritten,
        ", root" if root is not None else "",
    )
    return rewritten


def compile_title_function(
    message: ast.expr,
    names: Iterable[str],
    *,
    filename: str,
    namespace: dict[str, Any],
) -> Callable[..., str]:
    """Compile a title expression into a function of keyword-only ``names``.

    Names the expression uses that are not parameters resolve against
    ``namespace``, as they would in a function defined in that module.

    Args:
        message (ast.expr): Title expression, as built by `compile_template`.
        names (Iterable[str]): Parameter names, passed by keyword on every call.
        filename (str): File name reported in tracebacks.
        namespace (dict[str, Any]): Globals of the function.

    Returns:
        Callable[..., str]: The compiled title function.
    """
    params = list(names)
    kw_defaults: list[ast.expr | None] = [None] * len(params)
    definition = ast.FunctionDef(
        name=_TITLE_NAME,
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[ast.arg(arg=param) for param in params],
            kw_defaults=kw_defaults,
            kwarg=None,
            defaults=[],
        ),
        body=[ast.Return(value=message)],
        decorator_list=[],
        returns=None,
    )
    if hasattr(ast, "TypeVar"):  # Python 3.12+
        definition.type_params = []
    module = ast.fix_missing_locations(ast.Module(body=[definition], type_ignores=[]))
    code = _find_code(compile(module, filename, "exec", dont_inherit=True), _TITLE_NAME)
    if code is None:  # pragma: no cover - the definition is always compiled
        raise AnnotationError(f"@log lost the title function compiled for {filename}")
    return types.FunctionType(code, namespace, _TITLE_NAME)
