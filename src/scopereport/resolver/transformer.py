# topmark:header:start
#
#   project      : ScopeReport
#   file         : transformer.py
#   file_relpath : src/scopereport/resolver/transformer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Syntax tree rewriting for ``group(...)`` markers.

`MarkerTransformer` rewrites the body of one function:

- a statement marker (a bare ``group(...)`` expression statement) is hoisted off
  and the statement that follows it becomes
  ``with __scopereport__.open_nested(lambda: <message>): <statement>``;
  consecutive markers stack on the same statement, the first one outermost;
- an expression marker ``group(...)(operand)`` becomes
  ``__scopereport__.evaluate_nested(lambda: <message>, lambda: operand)``.

Every statement list (bodies, ``else`` branches, handlers, ``match`` cases) and
every expression position is visited. Nested ``def`` and ``class`` statements are
left untouched: they are resolved by their own ``@report``.

Problems are collected as `AnnotationDiagnostic` entries instead of being raised,
so every malformed marker of a function is reported in one pass.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Union

from scopereport.config.logging import get_logger
from scopereport.constants import RUNTIME_NAME
from scopereport.errors import AnnotationDiagnostic
from scopereport.resolver.markers import MarkerKind
from scopereport.resolver.templates import TemplateError, compile_template, find_unliftable

if TYPE_CHECKING:
    from scopereport.config.logging import ScopereportLogger
    from scopereport.resolver.markers import MarkerResolver

logger: ScopereportLogger = get_logger(__name__)

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

# Names of the lambda parameters binding a marker's positional arguments
_ARG_PREFIX = "_scopereport_arg"


def _no_arguments() -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=[],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _runtime_call(runtime_name: str, function: str, args: list[ast.expr]) -> ast.Call:
    return ast.Call(
        func=ast.Attribute(
            value=ast.Name(id=runtime_name, ctx=ast.Load()),
            attr=function,
            ctx=ast.Load(),
        ),
        args=args,
        keywords=[],
    )


def _is_docstring(stmt: ast.stmt) -> bool:
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and isinstance(stmt.value.value, str)
    )


def wrap_in_root(
    node: FunctionNode,
    message: ast.expr,
    *,
    runtime_name: str = RUNTIME_NAME,
) -> FunctionNode:
    """Wrap the body of ``node`` in a root scope, keeping its docstring in front.

    Args:
        node (FunctionNode): Function definition to modify in place.
        message (ast.expr): Expression producing the report title.
        runtime_name (str): Name under which the function reaches the runtime.

    Returns:
        FunctionNode: ``node``, for chaining.
    """
    head: list[ast.stmt] = []
    body = list(node.body)
    if body and _is_docstring(body[0]):
        head.append(body.pop(0))
    if not body:
        body = [ast.Pass()]
    opener = _runtime_call(
        runtime_name, "open_root", [ast.Lambda(args=_no_arguments(), body=message)]
    )
    wrapper = ast.With(
        items=[ast.withitem(context_expr=opener, optional_vars=None)],
        body=body,
    )
    node.body = [*head, ast.copy_location(wrapper, body[0])]
    return node


class MarkerTransformer(ast.NodeTransformer):
    """Rewrite ``group(...)`` markers in one function body.

    Args:
        markers (MarkerResolver): Decides which callees are markers.
        filename (str): File name used in diagnostics.
        runtime_name (str): Name under which rewritten code reaches the runtime.

    Attributes:
        diagnostics (list[AnnotationDiagnostic]): Problems found so far.
        rewritten (int): Number of markers rewritten so far.
    """

    def __init__(
        self,
        markers: MarkerResolver,
        *,
        filename: str,
        runtime_name: str = RUNTIME_NAME,
    ) -> None:
        self.markers = markers
        self.filename = filename
        self.runtime_name = runtime_name
        self.diagnostics: list[AnnotationDiagnostic] = []
        self.rewritten = 0

    # Entry point

    def transform_function(self, node: FunctionNode) -> FunctionNode:
        """Rewrite the markers in the body of ``node`` (in place) and return it."""
        node.body = self._visit_block(node.body)
        logger.debug(
            "Rewrote %d marker(s) in %s (%d diagnostic(s))",
            self.rewritten,
            node.name,
            len(self.diagnostics),
        )
        return node

    # Diagnostics

    def add_diagnostic(self, node: ast.AST, message: str) -> None:
        """Record a diagnostic located at ``node``."""
        self.diagnostics.append(
            AnnotationDiagnostic(
                filename=self.filename,
                lineno=getattr(node, "lineno", 1),
                col_offset=getattr(node, "col_offset", 0),
                message=message,
            )
        )

    # Marker recognition

    def _is_group(self, node: ast.expr) -> bool:
        return self.markers.kind_of(node) is MarkerKind.GROUP

    def _statement_marker(self, stmt: ast.stmt) -> ast.Call | None:
        if (
            isinstance(stmt, ast.Expr)
            and isinstance(stmt.value, ast.Call)
            and self._is_group(stmt.value.func)
        ):
            return stmt.value
        return None

    def _message_for(self, marker: ast.Call) -> ast.Lambda | None:
        """Build ``lambda: <message>`` for a marker call, or record why it cannot."""
        ok = True
        if marker.keywords:
            self.add_diagnostic(marker, "group(...) does not accept keyword arguments")
            ok = False
        if not marker.args:
            self.add_diagnostic(marker, "group(...) requires a template string literal")
            return None
        template_node, *arg_nodes = marker.args
        if not (isinstance(template_node, ast.Constant) and isinstance(template_node.value, str)):
            self.add_diagnostic(template_node, "group(...) template must be a string literal")
            return None
        for arg in arg_nodes:
            if isinstance(arg, ast.Starred):
                self.add_diagnostic(arg, "group(...) positional arguments cannot be unpacked")
                ok = False
                continue
            construct = find_unliftable(arg)
            if construct is not None:
                self.add_diagnostic(arg, f"group(...) positional argument cannot use {construct}")
                ok = False
        if not ok:
            return None

        placeholders: list[ast.expr] = [
            ast.Name(id=f"{_ARG_PREFIX}{index}", ctx=ast.Load()) for index in range(len(arg_nodes))
        ]
        try:
            text = compile_template(template_node.value, placeholders, anchor=template_node)
        except TemplateError as exc:
            self.add_diagnostic(template_node, str(exc))
            return None

        if not arg_nodes:
            return ast.Lambda(args=_no_arguments(), body=text)
        # Positional arguments are evaluated once each, when the message is needed.
        binder = ast.Lambda(
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg=f"{_ARG_PREFIX}{index}") for index in range(len(arg_nodes))],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=text,
        )
        values = [self.visit(arg) for arg in arg_nodes]
        return ast.Lambda(
            args=_no_arguments(),
            body=ast.Call(func=binder, args=values, keywords=[]),
        )

    # Statement lists

    def _visit_block(self, stmts: list[ast.stmt]) -> list[ast.stmt]:
        out: list[ast.stmt] = []
        pending: list[tuple[ast.Call, ast.Lambda | None]] = []
        for stmt in stmts:
            marker = self._statement_marker(stmt)
            if marker is not None:
                pending.append((marker, self._message_for(marker)))
                continue
            if pending and isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                for marker, _ in pending:
                    self.add_diagnostic(
                        marker,
                        "group(...) cannot annotate a nested definition; decorate it with "
                        "@report and @log instead",
                    )
                pending = []
                out.append(stmt)
                continue

            new_stmt = self.visit(stmt)
            for marker, message in reversed(pending):
                if message is not None:
                    new_stmt = self._wrap_statement(new_stmt, marker, message)
            pending = []
            out.append(new_stmt)

        for marker, _ in pending:
            self.add_diagnostic(
                marker, "group(...) must be followed by a statement in the same block"
            )
        if not out:
            out.append(ast.Pass())
        return out

    def _wrap_statement(self, stmt: ast.stmt, marker: ast.Call, message: ast.Lambda) -> ast.stmt:
        self.rewritten += 1
        opener = _runtime_call(self.runtime_name, "open_nested", [message])
        wrapper = ast.With(
            items=[ast.withitem(context_expr=opener, optional_vars=None)],
            body=[stmt],
        )
        return ast.copy_location(wrapper, marker)

    def generic_visit(self, node: ast.AST) -> ast.AST:
        for field, old_value in ast.iter_fields(node):
            if isinstance(old_value, list):
                if old_value and all(isinstance(value, ast.stmt) for value in old_value):
                    setattr(node, field, self._visit_block(old_value))
                    continue
                new_values: list[ast.AST] = []
                for value in old_value:
                    if isinstance(value, ast.AST):
                        new_value = self.visit(value)
                        if new_value is None:
                            continue
                        new_values.append(new_value)
                    else:
                        new_values.append(value)
                old_value[:] = new_values
            elif isinstance(old_value, ast.AST):
                new_node = self.visit(old_value)
                if new_node is None:
                    delattr(node, field)
                else:
                    setattr(node, field, new_node)
        return node

    # Traversal leaves

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.AST:
        return node

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> ast.AST:
        return node

    def visit_ClassDef(self, node: ast.ClassDef) -> ast.AST:
        return node

    # Expression markers

    def visit_Call(self, node: ast.Call) -> ast.AST:
        if isinstance(node.func, ast.Call) and self._is_group(node.func.func):
            return self._rewrite_expression_marker(node)
        if self._is_group(node.func):
            self.add_diagnostic(
                node,
                "group(...) must stand alone before a statement or be applied to one "
                "expression as group(...)(expr)",
            )
        return self.generic_visit(node)

    def _rewrite_expression_marker(self, node: ast.Call) -> ast.AST:
        marker = node.func
        assert isinstance(marker, ast.Call)
        message = self._message_for(marker)
        if len(node.args) != 1 or node.keywords or isinstance(node.args[0], ast.Starred):
            self.add_diagnostic(node, "group(...)(expr) takes exactly one positional operand")
            node.args = [self.visit(arg) for arg in node.args]
            return node
        operand = node.args[0]
        construct = find_unliftable(operand)
        if construct is not None:
            self.add_diagnostic(operand, f"group(...)(expr) operand cannot use {construct}")
            return node
        operand = self.visit(operand)
        if message is None:
            return node
        self.rewritten += 1
        call = _runtime_call(
            self.runtime_name,
            "evaluate_nested",
            [message, ast.Lambda(args=_no_arguments(), body=operand)],
        )
        return ast.copy_location(call, node)
