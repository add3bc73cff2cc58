# topmark:header:start
#
#   project      : ScopeReport
#   file         : decorators.py
#   file_relpath : src/scopereport/resolver/decorators.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The ``@report`` and ``@log`` decorators.

``@log`` opens a root scope around every call of the decorated function. On its
own it is a plain runtime wrapper; placed under ``@report`` it is folded into the
rewritten body instead, so the root scope lives inside the function itself::

    @report
    @log("Importing {path.name}")
    def import_file(path):
        group("Parsing")
        rows = parse(path)
        ...

``@report`` resolves the ``group(...)`` markers of the function it decorates (see
[`rewrite_function`][scopereport.resolver.compiler.rewrite_function]).
"""

from __future__ import annotations

import ast
import functools
import inspect
import types
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from scopereport.config.logging import get_logger
from scopereport.constants import ROOT_ARGS_NAME
from scopereport.errors import AnnotationError
from scopereport.resolver.compiler import (
    compile_title_function,
    rewrite_function,
    root_placeholders,
)
from scopereport.resolver.markers import MarkerKind, tag_marker
from scopereport.resolver.templates import TemplateError, compile_template
from scopereport.runtime.scope import open_root

if TYPE_CHECKING:
    from scopereport.config.logging import ScopereportLogger
    from scopereport.runtime.scope import Message

logger: ScopereportLogger = get_logger(__name__)

ROOT_ATTRIBUTE = "__scopereport_root__"


@dataclass(frozen=True)
class RootSpec:
    """Arguments of one ``@log`` annotation.

    Attributes:
        template: Title template, or None for an untitled root.
        args: Positional values referenced by ``{}`` / ``{0}`` fields, bound once
            at decoration time.
    """

    template: str | None = None
    args: tuple[object, ...] = ()

    def compile(self) -> ast.expr:
        """Return the title expression.

        Raises:
            TemplateError: If the template is malformed.
        """
        if self.template is None:
            return ast.Constant(value="")
        return compile_template(self.template, root_placeholders(len(self.args)))


def _message_factory(
    func: Callable[..., Any],
    spec: RootSpec,
) -> Callable[[tuple[Any, ...], dict[str, Any]], Message]:
    if spec.template is None:
        return lambda args, kwargs: ""
    # Look through decorators such as absorb_errors for the defining module
    target = inspect.unwrap(func)
    code = target.__code__ if isinstance(target, types.FunctionType) else None
    signature = inspect.signature(func)
    title = compile_title_function(
        spec.compile(),
        [*signature.parameters, ROOT_ARGS_NAME],
        filename=code.co_filename if code is not None else "<scopereport>",
        namespace=getattr(target, "__globals__", {}),
    )
    fallback = spec.template

    def message(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Message:
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError:
            # The call itself raises the binding error.
            return fallback
        bound.apply_defaults()
        values = {**bound.arguments, ROOT_ARGS_NAME: spec.args}
        return lambda: title(**values)

    return message


def _root_wrapper(func: Callable[..., Any], spec: RootSpec) -> Callable[..., Any]:
    message = _message_factory(func, spec)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with open_root(message(args, kwargs)):
                return await func(*args, **kwargs)

        wrapper: Callable[..., Any] = async_wrapper
    elif inspect.isasyncgenfunction(func):

        @functools.wraps(func)
        async def async_gen_wrapper(*args: Any, **kwargs: Any) -> Any:
            with open_root(message(args, kwargs)):
                async for item in func(*args, **kwargs):
                    yield item

        wrapper = async_gen_wrapper
    elif inspect.isgeneratorfunction(func):

        @functools.wraps(func)
        def gen_wrapper(*args: Any, **kwargs: Any) -> Any:
            with open_root(message(args, kwargs)):
                return (yield from func(*args, **kwargs))

        wrapper = gen_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with open_root(message(args, kwargs)):
                return func(*args, **kwargs)

        wrapper = sync_wrapper

    setattr(wrapper, ROOT_ATTRIBUTE, spec)
    return wrapper


@tag_marker(MarkerKind.LOG)
def log(*args: Any, **kwargs: Any) -> Any:
    """Open a root scope around every call of the decorated function.

    Usable bare (``@log``, untitled root) or with a template and positional values
    (``@log("Sync {} to {target}", "users")``). Named fields refer to the function's
    parameters and globals; positional fields refer to the values given here.

    Raises:
        AnnotationError: On keyword arguments, a non-string template or a malformed
            template.
    """
    if kwargs:
        raise AnnotationError(
            f"@log does not accept keyword arguments (got {', '.join(sorted(kwargs))})"
        )
    if len(args) == 1 and callable(args[0]) and not isinstance(args[0], str):
        return _root_wrapper(args[0], RootSpec())
    if args and not isinstance(args[0], str):
        raise AnnotationError(
            f"@log template must be a string literal, got {type(args[0]).__name__}"
        )

    spec = RootSpec(args[0], tuple(args[1:])) if args else RootSpec()
    try:
        spec.compile()
    except TemplateError as exc:
        raise AnnotationError(f"@log: {exc}") from None

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if not callable(func):
            raise AnnotationError(f"@log must decorate a callable, got {type(func).__name__}")
        return _root_wrapper(func, spec)

    return decorator


@tag_marker(MarkerKind.REPORT)
def report(*args: Any, **kwargs: Any) -> Any:
    """Resolve the ``group(...)`` markers of the decorated function.

    Must be used bare, directly on the function or directly above its ``@log``.

    Raises:
        AnnotationError: When given arguments, when applied to anything but a
            function or an ``@log`` wrapper, or when any marker is malformed (every
            problem of the function is listed).
    """
    if kwargs or len(args) != 1 or isinstance(args[0], str) or not callable(args[0]):
        raise AnnotationError("@report takes no arguments; use it bare, as @report")
    target = args[0]
    root = getattr(target, ROOT_ATTRIBUTE, None)
    if isinstance(root, RootSpec):
        func = target.__wrapped__
    else:
        func = target
        root = None
    if not isinstance(func, types.FunctionType) or hasattr(func, "__wrapped__"):
        raise AnnotationError(
            f"@report must decorate {getattr(target, '__qualname__', target)!s} directly "
            "or sit directly above @log"
        )
    logger.trace("Resolving %s", func.__qualname__)
    return rewrite_function(func, root=root)
