# topmark:header:start
#
#   project      : ScopeReport
#   file         : check.py
#   file_relpath : src/scopereport/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport `check` command.

Statically checks ``@report`` / ``@log`` / ``group(...)`` annotations in Python
files without importing them, printing one ``file:line:col: message`` line per
problem.

Exit codes: 0 when no problems were found, 1 when at least one was found, 66 when
an input path does not exist.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from scopereport.cli.errors import (
    ScopereportEncodingError,
    ScopereportFileNotFoundError,
    ScopereportIOError,
)
from scopereport.cli.exit_codes import ExitCode
from scopereport.cli.options import CONTEXT_SETTINGS, get_effective_verbosity
from scopereport.config.logging import get_logger
from scopereport.resolver.static import check_source, iter_python_files

if TYPE_CHECKING:
    from scopereport.cli.console import ConsoleLike
    from scopereport.config.logging import ScopereportLogger
    from scopereport.errors import AnnotationDiagnostic

logger: ScopereportLogger = get_logger(__name__)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScopereportEncodingError(f"{path}: cannot decode as UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise ScopereportIOError(f"{path}: {exc.strerror or exc}") from exc


@click.command(
    name="check",
    help="Check report annotations in Python files without importing them.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
def check_command(paths: tuple[Path, ...]) -> None:
    """Check the annotations of every Python file in ``paths``.

    Args:
        paths (tuple[Path, ...]): Files and directories (searched recursively).

    Raises:
        ScopereportFileNotFoundError: If a path does not exist.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel = get_effective_verbosity(ctx)

    for path in paths:
        if not path.exists():
            raise ScopereportFileNotFoundError(f"No such file or directory: {path}")

    files = list(iter_python_files(paths))
    diagnostics: list[AnnotationDiagnostic] = []
    for file in files:
        found = check_source(_read_source(file), str(file))
        if vlevel > 1:
            console.print(console.styled(f"{file}: {len(found)} problem(s)", dim=True))
        diagnostics.extend(found)

    for diagnostic in diagnostics:
        location = f"{diagnostic.filename}:{diagnostic.lineno}:{diagnostic.col_offset + 1}"
        console.print(f"{console.styled(location, bold=True)}: {diagnostic.message}")

    if diagnostics:
        console.print(
            console.styled(
                f"Found {len(diagnostics)} problem(s) in {len(files)} file(s).", fg="red"
            )
        )
        ctx.exit(ExitCode.FAILURE)
    if vlevel > 0:
        console.print(console.styled(f"All {len(files)} file(s) passed.", fg="green"))
    logger.debug("check: %d file(s), no problems", len(files))
