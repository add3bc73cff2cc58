# topmark:header:start
#
#   project      : ScopeReport
#   file         : keys.py
#   file_relpath : src/scopereport/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML key names for ScopeReport configuration.

These constants define the external configuration schema as it appears in
``scopereport.toml`` and in ``[tool.scopereport]`` inside ``pyproject.toml``.

Notes:
    - Values must match user-facing TOML keys exactly.
    - Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML keys used by ScopeReport configuration.

    The configuration is a single flat table; there are no sub-sections.
    """

    # Section path inside pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_SCOPEREPORT: Final[str] = "scopereport"

    # Draw frame borders when the sink reports a width
    KEY_FRAME: Final[str] = "frame"

    # Glyph set: "unicode" | "ascii"
    KEY_GLYPHS: Final[str] = "glyphs"

    # Color mode: "auto" | "always" | "never"
    KEY_COLOR: Final[str] = "color"

    ALL_KEYS: Final[tuple[str, ...]] = (KEY_FRAME, KEY_GLYPHS, KEY_COLOR)
