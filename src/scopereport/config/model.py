# topmark:header:start
#
#   project      : ScopeReport
#   file         : model.py
#   file_relpath : src/scopereport/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable runtime configuration for report rendering.

`ReportConfig` is a frozen snapshot. Layers (file, environment, explicit overrides)
are applied with `ReportConfig.merged_with`, which validates raw values and keeps
the previous setting for anything it cannot interpret.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, TypeVar

from scopereport.config.keys import Toml
from scopereport.config.logging import get_logger
from scopereport.rendering.color import ColorMode
from scopereport.rendering.theme import GlyphSet

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scopereport.config.logging import ScopereportLogger

logger: ScopereportLogger = get_logger(__name__)

_E = TypeVar("_E", ColorMode, GlyphSet)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def parse_bool(raw: object) -> bool | None:
    """Interpret a TOML bool or an environment-style string; None if not a boolean."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in _TRUE_STRINGS:
            return True
        if token in _FALSE_STRINGS:
            return False
    return None


def parse_choice(enum_cls: type[_E], raw: object) -> _E | None:
    """Return the member of ``enum_cls`` whose value matches ``raw`` (case-insensitive)."""
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        return None
    token = raw.strip().lower()
    for member in enum_cls:
        if member.value == token:
            return member
    return None


@dataclass(frozen=True)
class ReportConfig:
    """Rendering settings.

    Attributes:
        frame (bool): Draw frame borders when the sink reports a width.
        glyphs (GlyphSet): Glyph set for borders and tree connectors.
        color (ColorMode): Whether severity labels are colorized.
    """

    frame: bool = True
    glyphs: GlyphSet = GlyphSet.UNICODE
    color: ColorMode = ColorMode.AUTO

    def merged_with(self, values: Mapping[str, Any], *, source: str = "overrides") -> ReportConfig:
        """Return a copy with the recognized entries of ``values`` applied.

        Unknown keys and invalid values are logged as warnings and ignored.

        Args:
            values: Raw key/value pairs (TOML table, environment, keyword overrides).
            source: Human-readable origin used in log messages.

        Returns:
            ReportConfig: The merged configuration.
        """
        changes: dict[str, Any] = {}
        for key, raw in values.items():
            if key == Toml.KEY_FRAME:
                frame = parse_bool(raw)
                if frame is None:
                    logger.warning("Ignoring invalid %s=%r from %s", key, raw, source)
                    continue
                changes["frame"] = frame
            elif key == Toml.KEY_GLYPHS:
                glyphs = parse_choice(GlyphSet, raw)
                if glyphs is None:
                    logger.warning("Ignoring invalid %s=%r from %s", key, raw, source)
                    continue
                changes["glyphs"] = glyphs
            elif key == Toml.KEY_COLOR:
                color = parse_choice(ColorMode, raw)
                if color is None:
                    logger.warning("Ignoring invalid %s=%r from %s", key, raw, source)
                    continue
                changes["color"] = color
            else:
                logger.warning("Ignoring unknown configuration key %r from %s", key, source)
        if changes:
            logger.debug("Applying %s from %s", changes, source)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return a TOML-friendly mapping of this configuration."""
        return {
            Toml.KEY_FRAME: self.frame,
            Toml.KEY_GLYPHS: self.glyphs.value,
            Toml.KEY_COLOR: self.color.value,
        }
