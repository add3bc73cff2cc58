# topmark:header:start
#
#   project      : ScopeReport
#   file         : theme.py
#   file_relpath : src/scopereport/rendering/theme.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Glyph sets and the rendering theme.

A `Theme` bundles the glyph set used for frame borders and tree connectors with
the decision whether severity labels are colorized. It is chosen independently of
the sink's width reporting.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Glyphs:
    """Characters used to draw frames and tree connectors.

    Attributes:
        top_left: Top-left frame corner.
        top_right: Top-right frame corner.
        bottom_left: Bottom-left frame corner.
        bottom_right: Bottom-right frame corner.
        horizontal: Horizontal frame line.
        vertical: Vertical frame line.
        separator_left: Left end of the line between title and actions.
        separator_right: Right end of the line between title and actions.
        branch: Connector for a sibling that is not the last one.
        last_branch: Connector for the last sibling.
        indent: Indentation below a sibling that is not the last one.
        last_indent: Indentation below the last sibling.
    """

    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str
    separator_left: str
    separator_right: str
    branch: str
    last_branch: str
    indent: str
    last_indent: str

    def connector(self, last: bool) -> str:
        """Return the connector drawn in front of an action."""
        return self.last_branch if last else self.branch

    def child_indent(self, last: bool) -> str:
        """Return the indentation added for the children of an action."""
        return self.last_indent if last else self.indent

    def separator(self, width: int) -> str:
        """Return the separator line between title and actions for ``width`` columns."""
        fill = width - len(self.separator_left) + 1
        return f"{self.separator_left}{self.horizontal * max(fill, 0)}{self.separator_right}"


UNICODE_GLYPHS = Glyphs(
    top_left="╭",
    top_right="╮",
    bottom_left="╰",
    bottom_right="╯",
    horizontal="─",
    vertical="│",
    separator_left="├─┬",
    separator_right="┤",
    branch="├── ",
    last_branch="╰── ",
    indent="│   ",
    last_indent="    ",
)

ASCII_GLYPHS = Glyphs(
    top_left="+",
    top_right="+",
    bottom_left="+",
    bottom_right="+",
    horizontal="-",
    vertical="|",
    separator_left="+",
    separator_right="+",
    branch="|-- ",
    last_branch="\\-- ",
    indent="|   ",
    last_indent="    ",
)


class GlyphSet(str, Enum):
    """Named glyph sets selectable through configuration."""

    UNICODE = "unicode"
    ASCII = "ascii"

    @property
    def glyphs(self) -> Glyphs:
        """Return the glyphs for this set."""
        return UNICODE_GLYPHS if self is GlyphSet.UNICODE else ASCII_GLYPHS


@dataclass(frozen=True)
class Theme:
    """Presentation choices applied by the renderer.

    Attributes:
        glyphs: Frame and connector characters.
        color: Whether severity labels are colorized.
    """

    glyphs: Glyphs = UNICODE_GLYPHS
    color: bool = False
