"""Builders for the handful of forms every request to Emacs is made of."""

from __future__ import annotations

from typing import Mapping

from elisp_bridge import SExpression
from elisp_bridge.types.cell import cons, list_
from elisp_bridge.types.quote import quote
from elisp_bridge.types.symbol import Atom, atom


def progn(*forms: SExpression) -> SExpression:
    return list_(atom("progn"), *forms)


def require(feature: str | Atom, filename: str | None = None) -> SExpression:
    """``(require 'feature)``, or ``(require 'feature "filename")`` to load
    the feature from a file that is not on Emacs' load-path."""
    if not isinstance(feature, Atom):
        feature = atom(feature)
    if filename is None:
        return list_(atom("require"), quote(feature))
    return list_(atom("require"), quote(feature), filename)


def setq(name: str | Atom, value: SExpression) -> SExpression:
    if not isinstance(name, Atom):
        name = atom(name)
    return list_(atom("setq"), name, value)


def alist(mapping: Mapping[SExpression, SExpression]) -> SExpression:
    """An association list: ``((k1 . v1) (k2 v2a v2b) ...)``.

    A list or tuple value becomes the rest of its entry rather than a dotted
    tail, so ``{"a": ["x", "y"]}`` gives ``(("a" "x" "y"))``.
    """
    entries = []
    for key, value in mapping.items():
        if isinstance(value, (list, tuple)):
            entries.append(cons(key, list_(*value)))
        else:
            entries.append(cons(key, value))
    return list_(*entries)
