# topmark:header:start
#
#   project      : ScopeReport
#   file         : color.py
#   file_relpath : src/scopereport/rendering/color.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Color-mode resolution for ScopeReport output.

These helpers do not depend on a console instance so they can be shared by the
report sinks, the CLI, and tests.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import TYPE_CHECKING

from scopereport.config.logging import get_logger

if TYPE_CHECKING:
    from typing import TextIO

    from scopereport.config.logging import ScopereportLogger


logger: ScopereportLogger = get_logger(__name__)


class ColorMode(str, Enum):
    """User intent for colorized terminal output.

    Attributes:
        AUTO: Enable color only when appropriate (typically when the stream is a TTY).
        ALWAYS: Force-enable color regardless of TTY status.
        NEVER: Disable color entirely.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    color_mode_override: ColorMode | None,
    stream: TextIO | None = None,
    stream_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. **Override**: ``ALWAYS`` → True; ``NEVER`` → False.
        2. **Environment**:
            - ``FORCE_COLOR`` (set and not equal to ``"0"``) → True
            - ``NO_COLOR`` (set to any value) → False
        3. **Auto**: If none of the above decide, return ``stream.isatty()``.

    Args:
        color_mode_override: Configured or CLI `ColorMode`; `None` means "not provided".
        stream: Stream whose TTY status decides the auto case. Defaults to `sys.stdout`.
        stream_isatty: Optional override for TTY detection.

    Returns:
        True if ANSI color should be enabled; False otherwise.
    """
    if color_mode_override == ColorMode.ALWAYS:
        return True
    if color_mode_override == ColorMode.NEVER:
        return False

    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False

    if stream_isatty is None:
        target = stream if stream is not None else sys.stdout
        try:
            stream_isatty = target.isatty()
        except (AttributeError, OSError, ValueError):
            stream_isatty = False
    logger.trace("Color auto-detection: isatty=%s", stream_isatty)
    return bool(stream_isatty)
