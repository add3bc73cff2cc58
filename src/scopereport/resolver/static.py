# topmark:header:start
#
#   project      : ScopeReport
#   file         : static.py
#   file_relpath : src/scopereport/resolver/static.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Checking annotations without importing the code.

`check_source` parses a module, recognises its ``scopereport`` imports and reports
the same diagnostics ``@report`` would raise at decoration time, for every
``@report`` function of the module (methods and nested functions included). It
also flags ``group(...)`` markers in functions that are not decorated with
``@report`` and misplaced or malformed ``@report`` / ``@log`` decorators.
"""

from __future__ import annotations

import ast
import copy
from pathlib import Path
from typing import TYPE_CHECKING

from scopereport.config.logging import get_logger
from scopereport.errors import AnnotationDiagnostic
from scopereport.resolver.compiler import root_placeholders
from scopereport.resolver.markers import MarkerKind, StaticMarkers
from scopereport.resolver.templates import TemplateError, compile_template
from scopereport.resolver.transformer import MarkerTransformer

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from scopereport.config.logging import ScopereportLogger
    from scopereport.resolver.transformer import FunctionNode

logger: ScopereportLogger = get_logger(__name__)


def _diagnostic(filename: str, node: ast.AST, message: str) -> AnnotationDiagnostic:
    return AnnotationDiagnostic(
        filename=filename,
        lineno=getattr(node, "lineno", 1),
        col_offset=getattr(node, "col_offset", 0),
        message=message,
    )


def _callee(decorator: ast.expr) -> ast.expr:
    return decorator.func if isinstance(decorator, ast.Call) else decorator


def _own_nodes(function: FunctionNode) -> Iterator[ast.AST]:
    """Yield the nodes of ``function``'s body, without descending into nested scopes."""
    stack: list[ast.AST] = list(reversed(function.body))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        stack.extend(reversed(list(ast.iter_child_nodes(node))))


class _ModuleChecker:
    def __init__(self, filename: str, markers: StaticMarkers) -> None:
        self.filename = filename
        self.markers = markers
        self.diagnostics: list[AnnotationDiagnostic] = []

    def add(self, node: ast.AST, message: str) -> None:
        self.diagnostics.append(_diagnostic(self.filename, node, message))

    def check_function(self, function: FunctionNode) -> None:
        kinds = [self.markers.kind_of(_callee(d)) for d in function.decorator_list]
        if MarkerKind.REPORT not in kinds:
            self._check_unresolved(function)
            return

        index = kinds.index(MarkerKind.REPORT)
        report_node = function.decorator_list[index]
        if isinstance(report_node, ast.Call):
            self.add(report_node, "@report takes no arguments; use it bare, as @report")
        below = kinds[index + 1 :]
        if below and below != [MarkerKind.LOG]:
            self.add(
                report_node,
                "@report must decorate the function directly or sit directly above @log",
            )
        for kind, decorator in zip(kinds, function.decorator_list):
            if kind is MarkerKind.LOG:
                self._check_log(decorator)

        transformer = MarkerTransformer(self.markers, filename=self.filename)
        transformer.transform_function(copy.deepcopy(function))
        self.diagnostics.extend(transformer.diagnostics)

    def _check_unresolved(self, function: FunctionNode) -> None:
        for kind, decorator in zip(
            (self.markers.kind_of(_callee(d)) for d in function.decorator_list),
            function.decorator_list,
        ):
            if kind is MarkerKind.LOG:
                self._check_log(decorator)
        for node in _own_nodes(function):
            if isinstance(node, ast.Call) and self.markers.kind_of(node.func) is MarkerKind.GROUP:
                self.add(
                    node,
                    f"group(...) marker in {function.name}(), which is not decorated with @report",
                )

    def _check_log(self, decorator: ast.expr) -> None:
        if not isinstance(decorator, ast.Call):
            return
        if decorator.keywords:
            self.add(decorator, "@log does not accept keyword arguments")
        if not decorator.args:
            return
        template, *args = decorator.args
        if not (isinstance(template, ast.Constant) and isinstance(template.value, str)):
            self.add(template, "@log template must be a string literal")
            return
        if any(isinstance(arg, ast.Starred) for arg in args):
            return
        try:
            compile_template(template.value, root_placeholders(len(args)))
        except TemplateError as exc:
            self.add(template, f"@log: {exc}")


def check_source(source: str, filename: str = "<string>") -> list[AnnotationDiagnostic]:
    """Return the annotation diagnostics of a module's source, sorted by location.

    Args:
        source (str): Module source text.
        filename (str): File name used in diagnostics.

    Returns:
        list[AnnotationDiagnostic]: Every problem found; a syntax error yields a
        single diagnostic.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as exc:
        return [
            AnnotationDiagnostic(
                filename=filename,
                lineno=exc.lineno or 1,
                col_offset=max((exc.offset or 1) - 1, 0),
                message=f"syntax error: {exc.msg}",
            )
        ]

    markers = StaticMarkers.from_module(tree)
    if not markers.imports:
        return []
    checker = _ModuleChecker(filename, markers)
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            checker.check_function(node)
    diagnostics = sorted(checker.diagnostics, key=lambda d: (d.lineno, d.col_offset, d.message))
    logger.debug("Checked %s: %d diagnostic(s)", filename, len(diagnostics))
    return diagnostics


def iter_python_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield ``.py`` files: given files as-is, directories searched recursively."""
    for path in paths:
        if path.is_dir():
            yield from sorted(p for p in path.rglob("*.py") if p.is_file())
        else:
            yield path


def check_path(path: Path | str) -> list[AnnotationDiagnostic]:
    """Check one Python file, or every ``.py`` file below a directory.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {root}")
    diagnostics: list[AnnotationDiagnostic] = []
    for file in iter_python_files([root]):
        logger.trace("Checking %s", file)
        diagnostics.extend(check_source(file.read_text(encoding="utf-8"), str(file)))
    return diagnostics
