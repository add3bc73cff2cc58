# topmark:header:start
#
#   project      : ScopeReport
#   file         : model.py
#   file_relpath : src/scopereport/actions/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Recorded actions: the tree a report is rendered from.

Sections:
    * Severity: the three leaf severities with associated terminal colors.
    * Leaf: one severity-tagged message.
    * Group: a titled, ordered collection of child actions.
    * iter_leaves / count_by_severity: read-only helpers over action sequences.

Groups are only ever built when a nested scope closes with at least one recorded
action, so a `Group` with no children never appears in a finished tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from scopereport.rendering.colored_enum import ColoredStrEnum, click_style

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Severity(ColoredStrEnum):
    """Severity of a leaf action.

    The value is the label printed in front of the message; the colorizer is used
    for human-readable output only.
    """

    INFO = ("info", click_style(fg="blue"))
    WARNING = ("warning", click_style(fg="yellow"))
    ERROR = ("error", click_style(fg="red"))


@dataclass(frozen=True)
class Leaf:
    """A single severity-tagged message with no children."""

    severity: Severity
    message: str

    @classmethod
    def info(cls, message: str) -> Leaf:
        """Return an ``info`` leaf."""
        return cls(Severity.INFO, message)

    @classmethod
    def warning(cls, message: str) -> Leaf:
        """Return a ``warning`` leaf."""
        return cls(Severity.WARNING, message)

    @classmethod
    def error(cls, message: str) -> Leaf:
        """Return an ``error`` leaf."""
        return cls(Severity.ERROR, message)


@dataclass(frozen=True)
class Group:
    """A titled region whose recorded actions render as one sub-tree.

    Attributes:
        title: The formatted title of the closed scope.
        children: Child actions in recording order.
    """

    title: str
    children: tuple[Action, ...]


Action = Union[Leaf, Group]


def iter_leaves(actions: Iterable[Action]) -> Iterator[Leaf]:
    """Yield every leaf in ``actions`` depth-first, in recording order."""
    for action in actions:
        if isinstance(action, Group):
            yield from iter_leaves(action.children)
        else:
            yield action


def count_by_severity(actions: Iterable[Action]) -> dict[str, int]:
    """Return a mapping of leaf counts keyed by severity label.

    Returns:
        Mapping with keys ``"info"``, ``"warning"``, and ``"error"``.
    """
    counts: dict[str, int] = {severity.value: 0 for severity in Severity}
    for leaf in iter_leaves(actions):
        counts[leaf.severity.value] += 1
    return counts
