# Core type aliases for the Emacs Lisp data model.
# Values are plain Python types (str, int, float, bool) plus the tagged
# variants in elisp_bridge.types (Atom, Keyword, Quote, Cell, Nil).
#
# Naming guidance:
# - SExpression: a form that will be serialized and sent to Emacs.
# - LispValue:  any leaf value accepted inside a form.

from typing import Any

LispValue = Any
SExpression = LispValue
