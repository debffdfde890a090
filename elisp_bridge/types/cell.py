"""Cons cells and list construction."""

from __future__ import annotations

from dataclasses import dataclass

from elisp_bridge import SExpression
from elisp_bridge.types.nil import Nil, is_nil


@dataclass(frozen=True)
class Cell:
    """A cons cell. A chain of cells ending in Nil is a proper list;
    a chain ending in any other non-cell value is a dotted list."""

    car: SExpression
    cdr: SExpression

    def __str__(self) -> str:
        from elisp_bridge.printer import stringify
        return stringify(self)


def _nil_if_none(x: SExpression) -> SExpression:
    return Nil if is_nil(x) else x


def cons(car: SExpression, cdr: SExpression) -> Cell:
    return Cell(_nil_if_none(car), _nil_if_none(cdr))


def list_(*args: SExpression) -> SExpression:
    """Build a proper list from ``args``; ``list_()`` is Nil."""
    result: SExpression = Nil
    for item in reversed(args):
        result = cons(item, result)
    return result
