# topmark:header:start
#
#   project      : ScopeReport
#   file         : errors.py
#   file_relpath : src/scopereport/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by ScopeReport.

Taxonomy:
    - `ReportFailure`: the runtime typed failure. It carries no payload; its context
      was recorded as an error leaf at the point it was produced.
    - `AnnotationError`: decoration-time ("build-time") problems with ``@report``,
      ``@log`` or ``group(...)`` markers. Carries every `AnnotationDiagnostic` found
      in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ScopeReportError(Exception):
    """Base class for all ScopeReport errors."""


class ReportFailure(ScopeReportError):
    """Payload-free failure marker.

    Raised by [`fail`][scopereport.runtime.leaf.fail] and by foreign-error
    absorption. The message that explains the failure is already part of the
    current report, so the exception itself carries nothing forward.
    """

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return "Error"

    def __repr__(self) -> str:
        return "ReportFailure()"


@dataclass(frozen=True)
class AnnotationDiagnostic:
    """One decoration-time problem, attached to a source location.

    Attributes:
        filename: Source file of the annotated function.
        lineno: 1-based line of the offending annotation.
        col_offset: 0-based column of the offending annotation.
        message: Human-readable description.
    """

    filename: str
    lineno: int
    col_offset: int
    message: str

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}:{self.col_offset + 1}: {self.message}"


class AnnotationError(ScopeReportError):
    """Malformed or misplaced report annotations.

    Attributes:
        diagnostics: Every problem found, in source order.
    """

    def __init__(self, diagnostics: Iterable[AnnotationDiagnostic] | str) -> None:
        if isinstance(diagnostics, str):
            self.diagnostics: tuple[AnnotationDiagnostic, ...] = ()
            super().__init__(diagnostics)
            return
        self.diagnostics = tuple(diagnostics)
        super().__init__("\n".join(str(d) for d in self.diagnostics))
