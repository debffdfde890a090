"""Render Python-side forms as Emacs Lisp source text.

The printer is the only consumer of the form types, so every variant in
``elisp_bridge.types`` has exactly one branch in :func:`stringify`; a value
that matches none of them raises :class:`SerializationTypeError`.

Strings are wrapped in double quotes as-is. Escaping string contents is the
caller's business.
"""

from __future__ import annotations

import math

from elisp_bridge import SExpression
from elisp_bridge.errors import SerializationTypeError
from elisp_bridge.types.cell import Cell
from elisp_bridge.types.nil import is_nil
from elisp_bridge.types.quote import Quote
from elisp_bridge.types.symbol import Atom, Keyword


def stringify(sexp: SExpression) -> str:
    if isinstance(sexp, Cell):
        return f"({_stringify_list(sexp)})"
    if is_nil(sexp):
        return "nil"
    if isinstance(sexp, str):
        return f'"{sexp}"'
    # bool is a subclass of int, so it must be checked first
    if isinstance(sexp, bool):
        return "t" if sexp else "nil"
    if isinstance(sexp, int):
        return str(sexp)
    if isinstance(sexp, float):
        return _stringify_float(sexp)
    if isinstance(sexp, Atom):
        return sexp.name
    if isinstance(sexp, Keyword):
        return f":{sexp.name}"
    if isinstance(sexp, Quote):
        return f"'{stringify(sexp.sexp)}"
    raise SerializationTypeError(
        f"Unknown type of S-expression: {type(sexp).__name__}"
    )


def _stringify_float(x: float) -> str:
    if math.isnan(x):
        return "0.0e+NaN"
    if math.isinf(x):
        return "1.0e+INF" if x > 0 else "-1.0e+INF"
    return repr(x)


def _stringify_list(cell: Cell) -> str:
    """Render the inside of a list, without the enclosing parentheses.

    The cdr chain is walked in a loop, so the depth of recursion follows
    the nesting of sublists and not the length of the list.
    """
    parts: list[str] = []
    node = cell
    while True:
        # A cell in car position prints as its own parenthesized sublist.
        parts.append(stringify(node.car))
        tail = node.cdr
        if isinstance(tail, Cell):
            node = tail
            continue
        if not is_nil(tail):
            parts.append(".")
            parts.append(stringify(tail))
        return " ".join(parts)
