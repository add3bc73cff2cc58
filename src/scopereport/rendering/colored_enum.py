# topmark:header:start
#
#   project      : ScopeReport
#   file         : colored_enum.py
#   file_relpath : src/scopereport/rendering/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""String enums whose members carry a click style.

`Severity` labels are printed plain in collected output and styled on terminals.
Members of a `ColoredStrEnum` compare and hash as their label; the style is kept
on the side and only applied through `styled`:

```python
class Outcome(ColoredStrEnum):
    PASSED = ("passed", click_style(fg="green"))
    FAILED = ("failed", click_style(fg="red", bold=True))

Outcome.FAILED == "failed"        # True
Outcome.FAILED.styled(True)       # '\\x1b[31m\\x1b[1mfailed\\x1b[0m'
Outcome.FAILED.styled(False)      # 'failed'
```
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol

import click


class Colorizer(Protocol):
    """A ``str -> str`` decoration."""

    def __call__(self, text: str) -> str: ...


def click_style(**style_kwargs: Any) -> Colorizer:
    """Return a colorizer that applies ``click.style(text, **style_kwargs)``."""

    def _style(text: str) -> str:
        return click.style(text, **style_kwargs)

    return _style


class ColoredStrEnum(str, Enum):
    """A `str` enum with one `Colorizer` per member.

    Members are declared as ``NAME = (label, colorizer)``.
    """

    _value_: str
    _color: Colorizer

    def __new__(cls, label: str, color: Colorizer) -> ColoredStrEnum:
        member: ColoredStrEnum = str.__new__(cls, label)
        member._value_ = label
        member._color = color
        return member

    @property
    def value(self) -> str:
        """The member's label."""
        return self._value_

    @property
    def color(self) -> Colorizer:
        """The member's colorizer."""
        return self._color

    def styled(self, enable_color: bool) -> str:
        """Return the label, colorized when ``enable_color`` is set."""
        return self._color(self._value_) if enable_color else self._value_
