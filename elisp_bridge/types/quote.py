from __future__ import annotations

from dataclasses import dataclass

from elisp_bridge import SExpression
from elisp_bridge.types.symbol import Keyword


@dataclass(frozen=True)
class Quote:
    """A form that Emacs reads literally instead of evaluating."""

    sexp: SExpression

    def __str__(self) -> str:
        from elisp_bridge.printer import stringify
        return stringify(self)


def quote(sexp: SExpression) -> Quote | Keyword:
    # Keywords evaluate to themselves, so quoting one changes nothing.
    if isinstance(sexp, Keyword):
        return sexp
    return Quote(sexp)
