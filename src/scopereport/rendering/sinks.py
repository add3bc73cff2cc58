# topmark:header:start
#
#   project      : ScopeReport
#   file         : sinks.py
#   file_relpath : src/scopereport/rendering/sinks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line sinks that receive rendered report output.

A sink accepts one pre-formatted line at a time and optionally reports a width in
columns. A width enables bordered rendering; `None` selects plain output.

Implementations:
    - `ConsoleSink`: writes through `click.echo`, sized to the terminal.
    - `StreamSink`: writes to any text stream with a fixed (optional) width.
    - `CollectingSink`: keeps lines in memory (tests, embedding in other output).
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import click

from scopereport.constants import FRAME_MARGIN

if TYPE_CHECKING:
    from typing import TextIO


@runtime_checkable
class ReportSink(Protocol):
    """Destination for rendered report lines."""

    def width(self) -> int | None:
        """Return the frame width in columns, or None for unbordered output."""
        ...

    def write_line(self, line: str) -> None:
        """Write one line (without trailing newline)."""
        ...


class ConsoleSink:
    """Terminal sink writing through `click.echo`.

    Args:
        out (TextIO | None): Output stream. Defaults to `sys.stdout` at write time.
        frame (bool): Whether to report a width (and thus draw frames) at all.
        color (bool | None): Passed to `click.echo`; None lets click strip ANSI
            styles when the stream is not a terminal.
        width (int | None): Fixed frame width; when None the width is derived from
            the terminal size of ``out``.

    Attributes:
        frame (bool): Whether frames are drawn.
        color (bool | None): Color flag forwarded to `click.echo`.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        frame: bool = True,
        color: bool | None = None,
        width: int | None = None,
    ) -> None:
        self._out = out
        self.frame = frame
        self.color = color
        self._width = width

    @property
    def out(self) -> TextIO:
        """The stream this sink writes to."""
        return self._out if self._out is not None else sys.stdout

    def width(self) -> int | None:
        """Return the frame width for the attached terminal.

        Streams that are not attached to a terminal report no width, so redirected
        output is written unbordered.
        """
        if not self.frame:
            return None
        if self._width is not None:
            return self._width
        try:
            columns = os.get_terminal_size(self.out.fileno()).columns
        except (AttributeError, OSError, ValueError):
            return None
        return max(columns - FRAME_MARGIN, 0)

    def write_line(self, line: str) -> None:
        """Write one line to the stream."""
        click.echo(line, file=self.out, color=self.color)


class StreamSink:
    """Sink writing plain lines to a text stream.

    Args:
        stream (TextIO): Destination stream.
        width (int | None): Frame width, or None for unbordered output.
    """

    def __init__(self, stream: TextIO, *, width: int | None = None) -> None:
        self.stream = stream
        self._width = width

    def width(self) -> int | None:
        """Return the configured frame width."""
        return self._width

    def write_line(self, line: str) -> None:
        """Write ``line`` followed by a newline."""
        self.stream.write(line + "\n")


class CollectingSink:
    """In-memory sink.

    Args:
        width (int | None): Frame width, or None for unbordered output.

    Attributes:
        lines (list[str]): Every line written so far, in order.
    """

    def __init__(self, *, width: int | None = None) -> None:
        self._width = width
        self.lines: list[str] = []

    def width(self) -> int | None:
        """Return the configured frame width."""
        return self._width

    def write_line(self, line: str) -> None:
        """Append ``line``."""
        self.lines.append(line)

    @property
    def text(self) -> str:
        """All collected lines joined with newlines (with a trailing newline)."""
        return "".join(f"{line}\n" for line in self.lines)

    def clear(self) -> None:
        """Forget every collected line."""
        self.lines.clear()
