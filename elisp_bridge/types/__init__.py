from elisp_bridge.types.nil import Nil, NilType, is_nil
from elisp_bridge.types.symbol import Atom, Keyword, atom, keyword
from elisp_bridge.types.cell import Cell, cons, list_
from elisp_bridge.types.quote import Quote, quote

__all__ = [
    "Nil", "NilType", "is_nil",
    "Atom", "Keyword", "atom", "keyword",
    "Cell", "cons", "list_",
    "Quote", "quote",
]
