# topmark:header:start
#
#   project      : ScopeReport
#   file         : renderer.py
#   file_relpath : src/scopereport/rendering/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render a finished root scope as an indented, optionally framed tree.

Layout for a framed report (``width`` columns between the borders):

```text
╭──────────────────────────────╮
│ Test report                  │
├─┬────────────────────────────┤
│ ├── First group              │
│ │   ╰── info: attached       │
│ ╰── warning: careful         │
╰──────────────────────────────╯
```

Without a width the same lines are written without borders, padding or
separator. Padding and truncation measure visible characters only, so colorized
severity labels do not shift the right border.
"""

from __future__ import annotations

import re
import threading
from typing import TYPE_CHECKING

import click

from scopereport.actions.model import Group
from scopereport.config.logging import get_logger
from scopereport.constants import ELLIPSIS
from scopereport.rendering.theme import Theme

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from scopereport.actions.model import Action, Severity
    from scopereport.config.logging import ScopereportLogger
    from scopereport.rendering.sinks import ReportSink

logger: ScopereportLogger = get_logger(__name__)

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_ANSI_RESET = "\x1b[0m"

# Lines of one report are written together even when roots close concurrently
_write_lock = threading.Lock()


def format_leaf(severity: Severity, message: str, *, color: bool = False) -> str:
    """Return ``"<severity>: <message>"`` with an optionally colorized label."""
    return f"{severity.styled(color)}: {message}"


def visible_width(text: str) -> int:
    """Return the number of visible characters in ``text`` (ANSI styles excluded)."""
    return len(click.unstyle(text))


def _truncate_visible(text: str, keep: int) -> str:
    """Return the first ``keep`` visible characters of ``text``, keeping its styles."""
    out: list[str] = []
    seen = 0
    styled = False
    pos = 0
    while pos < len(text) and seen < keep:
        match = _ANSI_RE.match(text, pos)
        if match:
            out.append(match.group(0))
            styled = True
            pos = match.end()
            continue
        out.append(text[pos])
        seen += 1
        pos += 1
    if styled:
        out.append(_ANSI_RESET)
    return "".join(out)


def fit_to_width(text: str, width: int, ellipsis: str = ELLIPSIS) -> str:
    """Left-align ``text`` in ``width`` columns, truncating with ``ellipsis`` on overflow."""
    length = visible_width(text)
    if length <= width:
        return text + " " * (width - length)
    if width <= len(ellipsis):
        return ellipsis[:width]
    return _truncate_visible(text, width - len(ellipsis)) + ellipsis


def render_lines(
    title: str,
    actions: Sequence[Action],
    *,
    width: int | None,
    theme: Theme | None = None,
) -> Iterator[str]:
    """Yield the lines of one report.

    Args:
        title: Title of the root scope.
        actions: The root scope's finished actions, in recording order.
        width: Frame width in columns, or None for unbordered output.
        theme: Glyphs and color choice; defaults to unicode glyphs without color.

    Yields:
        str: One output line at a time, without trailing newline.
    """
    theme = theme or Theme()
    glyphs = theme.glyphs

    def framed(content: str) -> str:
        if width is None:
            return content
        return f"{glyphs.vertical}{fit_to_width(content, width)}{glyphs.vertical}"

    def walk(items: Sequence[Action], prefix: str) -> Iterator[str]:
        last_index = len(items) - 1
        for index, action in enumerate(items):
            last = index == last_index
            connector = glyphs.connector(last)
            if isinstance(action, Group):
                yield framed(f"{prefix}{connector}{action.title}")
                yield from walk(action.children, prefix + glyphs.child_indent(last))
            else:
                leaf_text = format_leaf(action.severity, action.message, color=theme.color)
                yield framed(f"{prefix}{connector}{leaf_text}")

    if width is not None:
        yield f"{glyphs.top_left}{glyphs.horizontal * width}{glyphs.top_right}"

    yield framed(f" {title}")

    if actions:
        if width is not None:
            yield glyphs.separator(width)
        yield from walk(actions, " ")

    if width is not None:
        yield f"{glyphs.bottom_left}{glyphs.horizontal * width}{glyphs.bottom_right}"


def render_report(
    title: str,
    actions: Sequence[Action],
    sink: ReportSink,
    theme: Theme | None = None,
) -> None:
    """Render one finished root scope to ``sink``.

    The sink's width is queried once per report, and the lines of one report are
    never interleaved with those of a report closing on another thread.

    Args:
        title: Title of the root scope.
        actions: The root scope's finished actions.
        sink: Destination for the lines.
        theme: Glyphs and color choice.
    """
    width: int | None = sink.width()
    logger.trace("Rendering report %r (%d actions, width=%s)", title, len(actions), width)
    lines = list(render_lines(title, actions, width=width, theme=theme))
    with _write_lock:
        for line in lines:
            sink.write_line(line)
